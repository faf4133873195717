from django.db import migrations


def seed_default_teacher(apps, schema_editor):
    from accounts.services import ensure_default_teacher

    Teacher = apps.get_model('accounts', 'Teacher')
    ensure_default_teacher(Teacher, using=schema_editor.connection.alias)


class Migration(migrations.Migration):

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_default_teacher, migrations.RunPython.noop),
    ]
