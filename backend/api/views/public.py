from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from exams.catalog import get_full_exam, list_exams_for
from exams.serializers import ExamSerializer, FullExamSerializer
from exams.submissions import submit_answers


class ExamDetail(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, exam_id):
        return Response(FullExamSerializer(get_full_exam(exam_id)).data)


class ExamList(APIView):
    """Exams a student can take, filtered by class, subject and month."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        params = request.query_params
        exams = list_exams_for(params.get('class'), params.get('subject'), params.get('month'))
        return Response(ExamSerializer(exams, many=True).data)


class SubmitAnswersView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        data = request.data
        submit_answers(
            data.get('student_name'),
            data.get('student_class'),
            data.get('exam_id'),
            data.get('answers'),
        )
        return Response({'ok': True})


class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return Response({'status': 'ok'})
