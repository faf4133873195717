from .teacher import (
    TeacherLoginView,
    CreateExamView,
    TeacherExamList,
)
from .public import (
    ExamDetail,
    ExamList,
    SubmitAnswersView,
    HealthView,
)
