import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("crm", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Solicitor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("solicitor_code", models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive"), ("suspended", "Suspended")], db_index=True, default="active", max_length=20)),
                ("commission_rate", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("hire_date", models.DateField(blank=True, null=True)),
                ("termination_date", models.DateField(blank=True, null=True)),
                ("location_id", models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("contact", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="solicitor", to="crm.contact")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="BonusRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rule_name", models.CharField(max_length=200)),
                ("bonus_percentage", models.DecimalField(decimal_places=2, max_digits=5)),
                ("payment_type", models.CharField(choices=[("tuition", "Tuition"), ("donation", "Donation"), ("both", "Both")], default="both", max_length=10)),
                ("min_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("max_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("effective_from", models.DateField()),
                ("effective_to", models.DateField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("priority", models.IntegerField(default=1)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("solicitor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bonus_rules", to="solicitors.solicitor")),
            ],
            options={
                "ordering": ["-priority", "id"],
                "indexes": [
                    models.Index(fields=["effective_from", "effective_to"], name="bonus_rule_effective_idx"),
                    models.Index(fields=["priority"], name="bonus_rule_priority_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BonusCalculation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("bonus_percentage", models.DecimalField(decimal_places=2, max_digits=5)),
                ("bonus_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("calculated_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("is_paid", models.BooleanField(db_index=True, default=False)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("bonus_rule", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="calculations", to="solicitors.bonusrule")),
                ("payment", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="bonus_calculation", to="crm.payment")),
                ("solicitor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bonus_calculations", to="solicitors.solicitor")),
            ],
            options={
                "ordering": ["-calculated_at", "-id"],
            },
        ),
    ]
