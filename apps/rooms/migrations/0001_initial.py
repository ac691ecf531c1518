import uuid

import apps.rooms.models
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Room',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('current_turn_index', models.PositiveIntegerField(default=0)),
                ('cycle_count', models.PositiveIntegerField(default=0)),
                ('version', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'rooms',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Member',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('turn_order', models.IntegerField()),
                ('bypass_quota', models.PositiveSmallIntegerField(default=apps.rooms.models.default_max_bypass_quota)),
                ('max_bypass_quota', models.PositiveSmallIntegerField(default=apps.rooms.models.default_max_bypass_quota)),
                ('skip_credits', models.PositiveIntegerField(default=0)),
                ('bypass_debt', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('active', 'Active'), ('on_leave', 'On leave')], default='active', max_length=20)),
                ('last_quota_reset_period', models.CharField(blank=True, max_length=7)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='rooms.room')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='membership', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'room_members',
                'ordering': ['room', 'turn_order'],
                'unique_together': {('room', 'turn_order')},
            },
        ),
        migrations.CreateModel(
            name='BypassRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('count', models.PositiveIntegerField(default=0)),
                ('last_bypassed_at', models.DateTimeField(blank=True, null=True)),
                ('helpee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='help_received', to='rooms.member')),
                ('helper', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='help_given', to='rooms.member')),
            ],
            options={
                'db_table': 'bypass_records',
                'ordering': ['-last_bypassed_at'],
                'unique_together': {('helpee', 'helper')},
            },
        ),
        migrations.AddField(
            model_name='room',
            name='last_bypasser',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='rooms.member'),
        ),
    ]
