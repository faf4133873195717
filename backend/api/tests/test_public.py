from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import Student, Teacher
from exams.authoring import create_exam
from exams.models import Answer, Question


class ExamDetailTests(APITestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.exam_id = create_exam(
            self.teacher.id,
            'Math',
            '5A',
            'Jan',
            [
                {
                    'text': '2+2?',
                    'score': 5,
                    'choices': [{'text': '4', 'is_correct': True}, {'text': '5', 'is_correct': False}],
                },
                {'text': 'Explain', 'score': 10},
            ],
        )

    def test_get_full_exam(self):
        response = self.client.get(reverse('api-exam-detail', args=[self.exam_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['exam']['exam_id'], self.exam_id)
        self.assertEqual(response.data['exam']['subject'], 'Math')

        questions = response.data['questions']
        self.assertEqual([q['question_text'] for q in questions], ['2+2?', 'Explain'])
        self.assertEqual([q['score'] for q in questions], [5, 10])
        self.assertEqual(questions[0]['exam_id'], self.exam_id)
        self.assertEqual(
            [(c['choice_text'], c['is_correct']) for c in questions[0]['choices']],
            [('4', True), ('5', False)],
        )
        self.assertEqual(questions[0]['choices'][0]['question_id'], questions[0]['question_id'])
        self.assertEqual(questions[1]['choices'], [])

    def test_exam_without_questions(self):
        exam_id = create_exam(self.teacher.id, 'Art', '5A', 'Jan')
        response = self.client.get(reverse('api-exam-detail', args=[exam_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['questions'], [])

    def test_unknown_exam(self):
        response = self.client.get(reverse('api-exam-detail', args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(reverse('api-exam-detail', args=['abc']))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ExamListTests(APITestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.match = create_exam(self.teacher.id, 'Math', '5A', 'Jan')
        create_exam(self.teacher.id, 'Math', '5A', 'Feb')
        create_exam(self.teacher.id, 'Science', '5A', 'Jan')
        self.url = reverse('api-exams')

    def test_filter_by_class_subject_month(self):
        response = self.client.get(self.url, {'class': '5A', 'subject': 'Math', 'month': 'Jan'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([exam['exam_id'] for exam in response.data], [self.match])

    def test_partial_filter_matches_nothing(self):
        response = self.client.get(self.url, {'class': '5A', 'subject': 'Math'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])


class SubmitAnswersTests(APITestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.exam_id = create_exam(
            self.teacher.id,
            'Math',
            '5A',
            'Jan',
            [{'text': '2+2?', 'score': 5, 'choices': [{'text': '4', 'is_correct': True}]}],
        )
        self.question = Question.objects.get(exam_id=self.exam_id)
        self.choice = self.question.choices.get()
        self.url = reverse('api-submit')
        self.payload = {
            'student_name': 'Sara',
            'student_class': '5A',
            'exam_id': self.exam_id,
            'answers': [{'question_id': self.question.id, 'choice_id': self.choice.id}],
        }

    def test_submit(self):
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'ok': True})
        answer = Answer.objects.get()
        self.assertEqual(answer.student, Student.objects.get(name='Sara', class_name='5A'))

    def test_same_student_reused(self):
        self.client.post(self.url, self.payload, format='json')
        self.client.post(self.url, self.payload, format='json')
        self.assertEqual(Student.objects.count(), 1)
        self.assertEqual(Answer.objects.count(), 2)

    def test_missing_fields(self):
        del self.payload['student_class']
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['fields'], ['student_class'])

    def test_unknown_exam(self):
        self.payload['exam_id'] = 999999
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Answer.objects.count(), 0)

    @override_settings(EXAMS_RESUBMISSION_POLICY='reject')
    def test_resubmission_rejected(self):
        self.assertEqual(self.client.post(self.url, self.payload, format='json').status_code, status.HTTP_200_OK)
        response = self.client.post(self.url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class HealthTests(APITestCase):
    def test_health(self):
        response = self.client.get(reverse('api-health'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'status': 'ok'})
