import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR.parent / '.env')

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dev-secret-key')
DEBUG = os.getenv('DJANGO_DEBUG', 'True').strip().lower() in {'1', 'true', 'yes'}
ALLOWED_HOSTS = ['*']

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'corsheaders',
    'accounts',
    'exams',
    'api',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'examhall.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'examhall.wsgi.application'

db_engine_env = os.getenv('DJANGO_DB_ENGINE', 'sqlite').strip().lower()
if db_engine_env in {'postgresql', 'postgres'}:
    db_backend = 'django.db.backends.postgresql'
elif db_engine_env == 'mysql':
    db_backend = 'django.db.backends.mysql'
else:
    db_backend = 'django.db.backends.sqlite3'

if db_backend == 'django.db.backends.sqlite3':
    db_name = os.getenv('DJANGO_DB_NAME')
    database = {
        'ENGINE': db_backend,
        'NAME': db_name if db_name else BASE_DIR / 'school.sqlite3',
    }
else:
    database = {
        'ENGINE': db_backend,
        'NAME': os.getenv('DJANGO_DB_NAME', 'examhall'),
        'USER': os.getenv('DJANGO_DB_USER', ''),
        'PASSWORD': os.getenv('DJANGO_DB_PASSWORD', ''),
        'HOST': os.getenv('DJANGO_DB_HOST', 'localhost'),
        'PORT': os.getenv('DJANGO_DB_PORT', ''),
    }

DATABASES = {'default': database}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

CORS_ALLOW_ALL_ORIGINS = True
CSRF_TRUSTED_ORIGINS = ['http://localhost:5173', 'http://127.0.0.1:5173']

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'EXCEPTION_HANDLER': 'api.exceptions.exam_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

# Seeded into an empty teachers table by accounts' data migration.
EXAMHALL_DEFAULT_TEACHER_NAME = os.getenv('EXAMHALL_DEFAULT_TEACHER_NAME', 'أحمد')
EXAMHALL_DEFAULT_TEACHER_CODE = os.getenv('EXAMHALL_DEFAULT_TEACHER_CODE', 'TCH123')

# append | replace | reject
EXAMS_RESUBMISSION_POLICY = os.getenv('EXAMS_RESUBMISSION_POLICY', 'append').strip().lower()

LOG_LEVEL = os.getenv('DJANGO_LOG_LEVEL', 'INFO').strip().upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        name: {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False}
        for name in ('examhall', 'accounts', 'exams', 'api')
    },
}
