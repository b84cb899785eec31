from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import payza_gateway.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False, auto_created=True, verbose_name='ID')),
                ('order_key', models.CharField(max_length=64, unique=True, default=payza_gateway.models._new_order_key, editable=False)),
                ('currency', models.CharField(max_length=8, default='USD')),
                ('total', models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))),
                ('tax_total', models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))),
                ('shipping_total', models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))),
                ('status', models.CharField(max_length=16, choices=[
                    ('pending', 'Pending'), ('processing', 'Processing'), ('failed', 'Failed'),
                    ('completed', 'Completed'), ('cancelled', 'Cancelled'),
                ], default='pending')),
                ('first_name', models.CharField(max_length=128, blank=True)),
                ('last_name', models.CharField(max_length=128, blank=True)),
                ('address_1', models.CharField(max_length=255, blank=True)),
                ('address_2', models.CharField(max_length=255, blank=True)),
                ('city', models.CharField(max_length=128, blank=True)),
                ('state', models.CharField(max_length=128, blank=True)),
                ('postcode', models.CharField(max_length=32, blank=True)),
                ('country', models.CharField(max_length=2, blank=True)),
                ('email', models.EmailField(max_length=254, blank=True)),
                ('phone', models.CharField(max_length=64, blank=True)),
                ('transaction_id', models.CharField(max_length=128, blank=True)),
                ('date_paid', models.DateTimeField(null=True, blank=True)),
                ('metadata', models.JSONField(default=dict, blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={'ordering': ['-created_at']},
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False, auto_created=True, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('quantity', models.IntegerField(default=1)),
                ('unit_price', models.DecimalField(max_digits=12, decimal_places=2)),
                ('sku', models.CharField(max_length=64, blank=True)),
                ('description', models.CharField(max_length=255, blank=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='payza_gateway.order')),
            ],
            options={'ordering': ['id']},
        ),
        migrations.CreateModel(
            name='OrderNote',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False, auto_created=True, verbose_name='ID')),
                ('note', models.TextField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notes', to='payza_gateway.order')),
            ],
            options={'ordering': ['id']},
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['status', 'created_at'], name='payza_order_status_idx'),
        ),
    ]
