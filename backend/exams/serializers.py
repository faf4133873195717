from rest_framework import serializers

from .models import Choice, Exam, Question


class ExamSerializer(serializers.ModelSerializer):
    exam_id = serializers.IntegerField(source='id', read_only=True)
    teacher_id = serializers.IntegerField(read_only=True)
    class_name = serializers.CharField(read_only=True)

    class Meta:
        model = Exam
        fields = ['exam_id', 'teacher_id', 'subject', 'class_name', 'month', 'created_at']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # "class" is a keyword, so the field is renamed on the way out.
        return {('class' if key == 'class_name' else key): value for key, value in data.items()}


class ChoiceSerializer(serializers.ModelSerializer):
    choice_id = serializers.IntegerField(source='id', read_only=True)
    question_id = serializers.IntegerField(read_only=True)
    choice_text = serializers.CharField(source='text', read_only=True)

    class Meta:
        model = Choice
        fields = ['choice_id', 'question_id', 'choice_text', 'is_correct']


class QuestionSerializer(serializers.ModelSerializer):
    question_id = serializers.IntegerField(source='id', read_only=True)
    exam_id = serializers.IntegerField(read_only=True)
    question_text = serializers.CharField(source='text', read_only=True)

    class Meta:
        model = Question
        fields = ['question_id', 'exam_id', 'question_text', 'score']


class FullExamSerializer(serializers.Serializer):
    """Serializes the {'exam', 'questions'} structure built by exams.catalog.get_full_exam."""

    def to_representation(self, instance):
        questions = []
        for entry in instance['questions']:
            question = QuestionSerializer(entry['question']).data
            question['choices'] = ChoiceSerializer(entry['choices'], many=True).data
            questions.append(question)
        return {'exam': ExamSerializer(instance['exam']).data, 'questions': questions}
