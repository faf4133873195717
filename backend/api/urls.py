from django.urls import re_path

from .views import (
    CreateExamView,
    ExamDetail,
    ExamList,
    HealthView,
    SubmitAnswersView,
    TeacherExamList,
    TeacherLoginView,
)

# The trailing slash is optional on every path.
urlpatterns = [
    re_path(r'^teacher-login/?$', TeacherLoginView.as_view(), name='api-teacher-login'),
    re_path(r'^create-exam/?$', CreateExamView.as_view(), name='api-create-exam'),
    re_path(r'^teacher-exams/(?P<teacher_id>[^/]+)/?$', TeacherExamList.as_view(), name='api-teacher-exams'),
    re_path(r'^exam/(?P<exam_id>[^/]+)/?$', ExamDetail.as_view(), name='api-exam-detail'),
    re_path(r'^exams/?$', ExamList.as_view(), name='api-exams'),
    re_path(r'^submit/?$', SubmitAnswersView.as_view(), name='api-submit'),
    re_path(r'^health/?$', HealthView.as_view(), name='api-health'),
]
