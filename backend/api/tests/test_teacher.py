from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import Teacher
from exams.models import Choice, Exam, Question


class TeacherLoginTests(APITestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.url = reverse('api-teacher-login')

    def test_login_success(self):
        response = self.client.post(self.url, {'code': 'MONA1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'teacher_id': self.teacher.id, 'name': 'Mona'})

    def test_login_wrong_code(self):
        response = self.client.post(self.url, {'code': 'nonexistent'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('detail', response.data)

    def test_login_without_code(self):
        response = self.client.post(self.url, {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_trailing_slash_is_optional(self):
        response = self.client.post(self.url + '/', {'code': 'MONA1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class CreateExamTests(APITestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.url = reverse('api-create-exam')
        self.payload = {
            'teacher_id': self.teacher.id,
            'subject': 'Math',
            'class': '5A',
            'month': 'Jan',
            'questions': [
                {
                    'text': '2+2?',
                    'score': 5,
                    'choices': [
                        {'text': '4', 'is_correct': True},
                        {'text': '5', 'is_correct': False},
                    ],
                },
            ],
        }

    def test_create_exam(self):
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        exam = Exam.objects.get(id=response.data['exam_id'])
        self.assertEqual(exam.subject, 'Math')
        self.assertEqual(exam.class_name, '5A')
        self.assertEqual(exam.questions.count(), 1)
        self.assertEqual(Choice.objects.filter(question__exam=exam).count(), 2)

    def test_missing_fields(self):
        del self.payload['subject']
        self.payload['month'] = ''
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['fields'], ['subject', 'month'])
        self.assertEqual(Exam.objects.count(), 0)

    def test_unknown_teacher(self):
        self.payload['teacher_id'] = 999999
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bad_score_or_long_subject_is_400(self):
        for score in ('--5', 10**20):
            self.payload['questions'][0]['score'] = score
            response = self.client.post(self.url, self.payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data['fields'], ['score'])
        self.payload['questions'][0]['score'] = 5
        self.payload['subject'] = 'x' * 300
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['fields'], ['subject'])
        self.assertEqual(Exam.objects.count(), 0)

    def test_storage_failure_is_500_and_leaves_nothing(self):
        with mock.patch('django.db.models.query.QuerySet.bulk_create', side_effect=DatabaseError('disk full')):
            response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(Exam.objects.count(), 0)
        self.assertEqual(Question.objects.count(), 0)


class TeacherExamListTests(APITestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.older = Exam.objects.create(teacher=self.teacher, subject='Math', class_name='5A', month='Jan')
        self.newer = Exam.objects.create(teacher=self.teacher, subject='Math', class_name='5A', month='Feb')
        Exam.objects.filter(id=self.newer.id).update(created_at=self.older.created_at + timedelta(hours=1))

    def test_list_newest_first(self):
        response = self.client.get(reverse('api-teacher-exams', args=[self.teacher.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([exam['exam_id'] for exam in response.data], [self.newer.id, self.older.id])
        self.assertEqual(
            set(response.data[0]),
            {'exam_id', 'teacher_id', 'subject', 'class', 'month', 'created_at'},
        )
        self.assertEqual(response.data[0]['class'], '5A')

    def test_unknown_teacher_has_no_exams(self):
        response = self.client.get(reverse('api-teacher-exams', args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])
