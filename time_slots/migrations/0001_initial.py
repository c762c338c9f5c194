import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='TimeSlot',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('start_time', models.DateTimeField()),
                ('end_time', models.DateTimeField()),
                ('service_provider', models.CharField(max_length=100)),
                ('is_available', models.BooleanField(default=True, help_text='False while the slot is booked')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'time_slots',
                'ordering': ['start_time'],
                'indexes': [
                    models.Index(fields=['service_provider', 'start_time'], name='time_slots_provider_start_idx'),
                    models.Index(fields=['is_available', 'start_time'], name='time_slots_available_start_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('end_time__gt', models.F('start_time'))),
                        name='time_slot_end_after_start',
                    ),
                ],
            },
        ),
    ]
