# apps/dashboard/reports_views.py
import csv
import logging
from io import BytesIO

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import redirect
from django.utils import timezone
from django.utils.html import escape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from apps.core.backend import BackendError
from apps.core.decorators import admin_required
from apps.core.formatting import display_applicant_id, format_status, full_name
from apps.core.search import filter_by_status, filter_records
from apps.evaluations.scoring import MAX_TOTAL, score_rows

from .views import APPLICANT_SEARCH_FIELDS, fetch_applicants, has_assessor

logger = logging.getLogger(__name__)

APPLICANT_HEADERS = ['Applicant ID', 'Name', 'Email', 'Course', 'Status', 'Assessor Assigned']

TABLE_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1e3a8a')),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ('FONTSIZE', (0, 0), (-1, -1), 9),
])


def applicant_row(applicant):
    info = applicant.get('personalInfo') or {}
    return [
        display_applicant_id(applicant),
        full_name(info, last_first=True) or 'N/A',
        applicant.get('email') or info.get('emailAddress') or 'N/A',
        info.get('firstPriorityCourse') or 'Not specified',
        format_status(applicant.get('status')),
        'Yes' if has_assessor(applicant) else 'No',
    ]


def _stamp():
    return timezone.localtime().strftime('%Y%m%d')


def applicants_csv(applicants):
    """Applicant list as a CSV attachment"""
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="applicants_{_stamp()}.csv"'

    writer = csv.writer(response)
    writer.writerow(APPLICANT_HEADERS)
    for applicant in applicants:
        writer.writerow(applicant_row(applicant))
    return response


def _pdf_response(elements, filename):
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    doc.build(elements)

    response = HttpResponse(buffer.getvalue(), content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def applicants_pdf(applicants):
    """Applicant list as a PDF table"""
    styles = getSampleStyleSheet()
    elements = [
        Paragraph('<b>ETEEAP Applicants</b>', styles['Title']),
        Paragraph(f"Generated {timezone.localtime().strftime('%Y-%m-%d %H:%M')}", styles['Normal']),
        Spacer(1, 12),
    ]
    table = Table([APPLICANT_HEADERS] + [applicant_row(a) for a in applicants], repeatRows=1)
    table.setStyle(TABLE_STYLE)
    elements.append(table)
    return _pdf_response(elements, f'applicants_{_stamp()}.pdf')


def result_pdf(applicant, result):
    """Result slip for one evaluated applicant"""
    styles = getSampleStyleSheet()
    info = applicant.get('personalInfo') or {}
    elements = [
        Paragraph('<b>ETEEAP Evaluation Result</b>', styles['Title']),
        Paragraph(f'Applicant: {escape(full_name(info) or "N/A")}', styles['Normal']),
        Paragraph(f'Applicant ID: {escape(display_applicant_id(applicant))}', styles['Normal']),
        Spacer(1, 12),
    ]

    data = [['Category', 'Score']]
    for label, score, cap in score_rows(result):
        data.append([label, f'{score}/{cap}'])
    data.append(['Total', f'{result.total}/{MAX_TOTAL}'])

    table = Table(data, colWidths=[300, 120])
    table.setStyle(TABLE_STYLE)
    elements.append(table)
    elements.append(Spacer(1, 20))
    elements.append(Paragraph(f'<b>Remarks: {result.remarks}</b>', styles['Heading2']))
    return _pdf_response(elements, f'result_{display_applicant_id(applicant)}.pdf')


EXPORTERS = {
    'csv': applicants_csv,
    'pdf': applicants_pdf,
}


@admin_required
def export_applicants(request):
    """
    Download the applicant list.

    Honours the same ``q`` and ``status`` filters as the list page;
    ``format`` picks csv (default) or pdf.
    """
    exporter = EXPORTERS.get(request.GET.get('format', 'csv'))
    if exporter is None:
        messages.error(request, 'Unsupported export format')
        return redirect('dashboard:applicants')

    try:
        applicants = fetch_applicants(request.backend)
    except BackendError as exc:
        logger.error('Applicant export failed: %s', exc.message)
        messages.error(request, exc.message or 'Failed to fetch applicants')
        return redirect('dashboard:applicants')

    applicants = filter_by_status(applicants, request.GET.get('status', ''))
    applicants = filter_records(applicants, request.GET.get('q', ''), APPLICANT_SEARCH_FIELDS)
    logger.info('Exporting %d applicants as %s', len(applicants), request.GET.get('format', 'csv'))
    return exporter(applicants)
