from django.contrib import admin

from .models import Answer, Choice, Exam, Question


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ('subject', 'class_name', 'month', 'teacher', 'created_at')
    list_filter = ('class_name', 'subject', 'month')
    inlines = [QuestionInline]


class ChoiceInline(admin.TabularInline):
    model = Choice
    extra = 0


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('exam', 'position', 'text', 'score')
    inlines = [ChoiceInline]


@admin.register(Answer)
class AnswerAdmin(admin.ModelAdmin):
    list_display = ('student', 'exam', 'question', 'choice', 'submitted_at')
    list_filter = ('exam',)
