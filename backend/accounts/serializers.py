from rest_framework import serializers

from .models import Teacher


class TeacherLoginSerializer(serializers.ModelSerializer):
    teacher_id = serializers.IntegerField(source='id', read_only=True)

    class Meta:
        model = Teacher
        fields = ['teacher_id', 'name']
