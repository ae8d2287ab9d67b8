"""
Initial migration for Floorman models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


FLOOR_CHOICES = [
    ('Knitting', 'Knitting'),
    ('Linking', 'Linking'),
    ('Checking', 'Checking'),
    ('Washing', 'Washing'),
    ('Boarding', 'Boarding'),
    ('Silicon', 'Silicon'),
    ('Secondary Checking', 'Secondary Checking'),
    ('Branding', 'Branding'),
    ('Final Checking', 'Final Checking'),
    ('Warehouse', 'Warehouse'),
    ('Dispatch', 'Dispatch'),
]

LOG_ACTION_CHOICES = [
    ('Article Added', 'Article Added'),
    ('Quantity Updated', 'Quantity Updated'),
    *[(f'Transferred to {floor}', f'Transferred to {floor}') for floor, _ in FLOOR_CHOICES],
    ('M1 Quantity Updated', 'M1 Quantity Updated'),
    ('M2 Quantity Updated', 'M2 Quantity Updated'),
    ('M3 Quantity Updated', 'M3 Quantity Updated'),
    ('M4 Quantity Updated', 'M4 Quantity Updated'),
    ('M2 Item Shifted to M1', 'M2 Item Shifted to M1'),
    ('M2 Item Shifted to M3', 'M2 Item Shifted to M3'),
    ('M2 Item Shifted to M4', 'M2 Item Shifted to M4'),
    ('Repair Started', 'Repair Started'),
    ('Final Quality Confirmed', 'Final Quality Confirmed'),
    ('Final Quality Rejected', 'Final Quality Rejected'),
]


class Migration(migrations.Migration):
    """Create Floorman models: Article, ArticleLog."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Article',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=64, unique=True, verbose_name='Code')),
                ('article_number', models.CharField(db_index=True, help_text='Links to the product definition', max_length=64, verbose_name='Article Number')),
                ('order_id', models.CharField(blank=True, db_index=True, default='', max_length=64, verbose_name='Order')),
                ('planned_quantity', models.PositiveIntegerField(verbose_name='Planned Quantity')),
                ('linking_type', models.CharField(choices=[('Auto Linking', 'Auto Linking'), ('Rosso Linking', 'Rosso Linking'), ('Hand Linking', 'Hand Linking')], default='Rosso Linking', max_length=20, verbose_name='Linking Type')),
                ('priority', models.CharField(choices=[('Urgent', 'Urgent'), ('High', 'High'), ('Medium', 'Medium'), ('Low', 'Low')], default='Medium', max_length=10, verbose_name='Priority')),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('In Progress', 'In Progress'), ('Completed', 'Completed'), ('On Hold', 'On Hold'), ('Cancelled', 'Cancelled')], db_index=True, default='Pending', max_length=20, verbose_name='Status')),
                ('progress', models.PositiveSmallIntegerField(default=0, verbose_name='Progress (%)')),
                ('floor_sequence', models.JSONField(blank=True, default=list, verbose_name='Floor Sequence')),
                ('floor_quantities', models.JSONField(blank=True, default=dict, verbose_name='Floor Quantities')),
                ('final_quality_confirmed', models.BooleanField(default=False, verbose_name='Final Quality Confirmed')),
                ('remarks', models.TextField(blank=True, default='', verbose_name='Remarks')),
                ('version', models.PositiveIntegerField(default=0, verbose_name='Version')),
                ('started_at', models.DateTimeField(blank=True, null=True, verbose_name='Started At')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Completed At')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
            ],
            options={
                'verbose_name': 'Article',
                'verbose_name_plural': 'Articles',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['order_id', 'status'], name='floorman_ar_order_i_7c1e2b_idx')],
            },
        ),
        migrations.CreateModel(
            name='ArticleLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_id', models.CharField(blank=True, default='', max_length=64, verbose_name='Order')),
                ('action', models.CharField(choices=LOG_ACTION_CHOICES, max_length=40, verbose_name='Action')),
                ('quantity', models.IntegerField(default=0, help_text='Change for counter updates, units moved for transfers', verbose_name='Quantity')),
                ('floor', models.CharField(blank=True, default='', max_length=30, verbose_name='Floor')),
                ('from_floor', models.CharField(blank=True, default='', max_length=30, verbose_name='From Floor')),
                ('to_floor', models.CharField(blank=True, default='', max_length=30, verbose_name='To Floor')),
                ('previous_value', models.JSONField(blank=True, null=True, verbose_name='Previous Value')),
                ('new_value', models.JSONField(blank=True, null=True, verbose_name='New Value')),
                ('remarks', models.TextField(blank=True, default='', verbose_name='Remarks')),
                ('change_reason', models.CharField(blank=True, default='', max_length=255, verbose_name='Change Reason')),
                ('quality_status', models.CharField(blank=True, default='', max_length=40, verbose_name='Quality Status')),
                ('batch_number', models.CharField(blank=True, default='', max_length=64, verbose_name='Batch Number')),
                ('user_id', models.CharField(blank=True, default='', max_length=64, verbose_name='User')),
                ('floor_supervisor_id', models.CharField(blank=True, default='', max_length=64, verbose_name='Floor Supervisor')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Timestamp')),
                ('article', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='logs', to='floorman.article', verbose_name='Article')),
            ],
            options={
                'verbose_name': 'Article Log',
                'verbose_name_plural': 'Article Logs',
                'ordering': ['timestamp', 'pk'],
                'indexes': [
                    models.Index(fields=['article', 'timestamp'], name='floorman_ar_article_3f9a0d_idx'),
                    models.Index(fields=['action'], name='floorman_ar_action_5b2c71_idx'),
                ],
            },
        ),
    ]
