import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('notif_type', models.CharField(choices=[('new_job', 'งานใหม่'), ('job_accepted', 'รับงานแล้ว'), ('job_completed', 'งานเสร็จแล้ว'), ('payment', 'การชำระเงิน'), ('rating', 'รีวิว'), ('lottery', 'ลอตเตอรี่'), ('system', 'ระบบ')], max_length=20)),
                ('title', models.CharField(max_length=255)),
                ('body', models.TextField(blank=True)),
                ('data', models.JSONField(blank=True, default=dict)),
                ('is_read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['recipient', '-created_at'], name='notif_recipient_created_idx'),
                    models.Index(fields=['recipient', 'is_read'], name='notif_recipient_unread_idx'),
                ],
            },
        ),
    ]
