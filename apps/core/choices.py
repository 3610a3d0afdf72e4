# apps/core/choices.py
"""Value sets shared by the portal's forms and templates"""

ROLE_APPLICANT = 'applicant'
ROLE_ADMIN = 'admin'
ROLE_ASSESSOR = 'assessor'

ROLE_CHOICES = (
    (ROLE_APPLICANT, 'Applicant'),
    (ROLE_ADMIN, 'Admin'),
    (ROLE_ASSESSOR, 'Assessor'),
)

ROLES = tuple(key for key, _ in ROLE_CHOICES)

# URL names of each role's login page
LOGIN_URL_NAMES = {
    ROLE_APPLICANT: 'accounts:applicant-login',
    ROLE_ADMIN: 'accounts:admin-login',
    ROLE_ASSESSOR: 'accounts:assessor-login',
}

EXPERTISE_CHOICES = (
    ('engineering', 'Engineering'),
    ('education', 'Education'),
    ('business', 'Business'),
    ('information_technology', 'IT'),
    ('health_sciences', 'Health Sciences'),
    ('arts_sciences', 'Arts & Sciences'),
    ('architecture', 'Architecture'),
    ('industrial_technology', 'Industrial Technology'),
    ('hospitality_management', 'Hospitality Management'),
    ('other', 'Other'),
)

ASSESSOR_TYPE_CHOICES = (
    ('internal', 'Internal'),
    ('external', 'External'),
)

COURSE_STATUS_CHOICES = (
    ('active', 'Active'),
    ('inactive', 'Inactive'),
)

GENDER_CHOICES = (
    ('male', 'Male'),
    ('female', 'Female'),
    ('other', 'Other'),
)

CIVIL_STATUS_CHOICES = (
    ('single', 'Single'),
    ('married', 'Married'),
    ('widowed', 'Widowed'),
    ('separated', 'Separated'),
)

# Document categories used by the assessor and admin document tables
FILE_CATEGORIES = (
    ('initial', 'initial-submissions', 'Initial Submissions'),
    ('resume', 'resume-cv', 'Updated Resume / CV'),
    ('training', 'training-certs', 'Certificate of Training'),
    ('awards', 'awards', 'Awards'),
    ('interview', 'interview', 'Interview Form'),
)
OTHER_FILES = ('others', 'others', 'Others')

# Sections of the applicant portfolio, keyed as the backend groups them
PORTFOLIO_SECTIONS = (
    ('initial-submission', 'Initial Submissions'),
    ('resume', 'Updated Resume / CV'),
    ('training', 'Certificate of Training'),
    ('awards', 'Awards'),
    ('interview', 'Interview Form'),
    ('others', 'Others'),
)

ALLOWED_UPLOAD_TYPES = (
    'application/pdf',
    'image/jpeg',
    'image/png',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
)
