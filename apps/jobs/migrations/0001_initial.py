import apps.cores.constants
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('services', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Job',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('fee_amount', models.DecimalField(decimal_places=0, editable=False, max_digits=12)),
                ('location_from', models.CharField(blank=True, max_length=255)),
                ('location_to', models.CharField(blank=True, max_length=255)),
                ('submit_photo', models.FileField(blank=True, null=True, upload_to=apps.cores.constants.job_photo_upload_path)),
                ('payment_slip', models.FileField(blank=True, null=True, upload_to=apps.cores.constants.payment_slip_upload_path)),
                ('status', models.CharField(choices=[('pending', 'รอดำเนินการ'), ('in_progress', 'กำลังดำเนินงาน'), ('completed', 'เสร็จสิ้น'), ('cancelled', 'ยกเลิก')], default='pending', max_length=20)),
                ('payment_status', models.CharField(choices=[('unpaid', 'ยังไม่ชำระ'), ('pending_confirm', 'รอยืนยันการชำระ'), ('paid', 'ชำระแล้ว')], default='unpaid', max_length=20)),
                ('rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='jobs_as_customer', to=settings.AUTH_USER_MODEL)),
                ('freelancer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='jobs_as_freelancer', to=settings.AUTH_USER_MODEL)),
                ('service', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='jobs', to='services.service')),
            ],
            options={
                'db_table': 'jobs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['customer', '-created_at'], name='jobs_customer_created_idx'),
                    models.Index(fields=['freelancer', '-created_at'], name='jobs_freelancer_created_idx'),
                    models.Index(fields=['status'], name='jobs_status_idx'),
                ],
            },
        ),
    ]
