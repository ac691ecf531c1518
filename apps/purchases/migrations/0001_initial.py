import uuid
from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('rooms', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Purchase',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('buyer_name', models.CharField(max_length=100)),
                ('cost', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('currency', models.CharField(default='IDR', max_length=3)),
                ('description', models.TextField(blank=True)),
                ('photo_refs', models.JSONField(default=list)),
                ('delivery_proof_refs', models.JSONField(blank=True, default=list)),
                ('is_bypass_task', models.BooleanField(default=False)),
                ('is_debt_payment', models.BooleanField(default=False)),
                ('fulfillment', models.CharField(choices=[('self_pickup', 'Self pickup'), ('courier', 'Courier')], default='self_pickup', max_length=20)),
                ('submission_key', models.CharField(max_length=64, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('buyer', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='water_purchases', to=settings.AUTH_USER_MODEL)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='purchases', to='rooms.room')),
            ],
            options={
                'db_table': 'purchases',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['room', 'created_at'], name='purchases_room_c3d1a8_idx'),
                    models.Index(fields=['buyer', 'created_at'], name='purchases_buyer_7e52b0_idx'),
                ],
            },
        ),
    ]
