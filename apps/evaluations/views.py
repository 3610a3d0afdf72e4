# apps/evaluations/views.py
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import IsPortalAssessor
from apps.core.utils import first_error, is_object_id

from . import drafts
from .scoring import CATEGORIES, PASSING_SCORE, evaluate
from .serializers import EvaluationScoresSerializer


@api_view(['POST'])
@permission_classes([IsPortalAssessor])
def evaluate_scores(request):
    """Total up a posted score set without saving anything"""
    serializer = EvaluationScoresSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'error': first_error(serializer.errors),
        }, status=status.HTTP_400_BAD_REQUEST)

    result = evaluate(serializer.validated_data)
    return Response({
        'success': True,
        'data': result.as_dict(),
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsPortalAssessor])
def scoring_rules(request):
    return Response({
        'success': True,
        'data': {
            'categories': [
                {'key': c.key, 'label': c.label, 'max': c.cap} for c in CATEGORIES
            ],
            'passing_score': PASSING_SCORE,
        },
    })


@api_view(['GET'])
@permission_classes([IsPortalAssessor])
def draft_summary(request, applicant_id):
    """Current unsaved totals for one applicant's scoring page"""
    if not is_object_id(applicant_id):
        return Response({
            'success': False,
            'error': 'Invalid applicant ID format',
        }, status=status.HTTP_400_BAD_REQUEST)

    draft = drafts.get_draft(request, applicant_id)
    if draft is None:
        return Response({
            'success': False,
            'error': 'No scores recorded for this applicant yet',
        }, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'success': True,
        'data': evaluate(draft).as_dict(),
    })
