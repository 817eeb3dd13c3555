import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('price_thb', models.DecimalField(decimal_places=2, max_digits=12)),
                ('category', models.CharField(choices=[('electric', 'ช่างไฟ'), ('plumbing', 'ช่างน้ำ'), ('carpenter', 'ช่างไม้'), ('paint', 'ทาสี'), ('transport', 'ขนส่ง'), ('garden', 'ตัดหญ้า'), ('other', 'อื่นๆ')], default='other', max_length=20)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('provider', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='services', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'services',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['category'], name='services_category_idx'),
                    models.Index(fields=['provider'], name='services_provider_idx'),
                ],
            },
        ),
    ]
