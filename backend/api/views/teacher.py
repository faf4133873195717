from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.serializers import TeacherLoginSerializer
from accounts.services import lookup_teacher_by_code
from exams.authoring import create_exam
from exams.catalog import list_exams_by_teacher
from exams.serializers import ExamSerializer


class TeacherLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        teacher = lookup_teacher_by_code(request.data.get('code'))
        return Response(TeacherLoginSerializer(teacher).data)


class CreateExamView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        data = request.data
        exam_id = create_exam(
            data.get('teacher_id'),
            data.get('subject'),
            data.get('class'),
            data.get('month'),
            data.get('questions'),
        )
        return Response({'exam_id': exam_id}, status=status.HTTP_200_OK)


class TeacherExamList(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, teacher_id):
        exams = list_exams_by_teacher(teacher_id)
        return Response(ExamSerializer(exams, many=True).data)
