import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("crm", "0001_initial"),
        ("solicitors", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="payment",
            name="solicitor",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="solicitors.solicitor"),
        ),
        migrations.AddField(
            model_name="payment",
            name="bonus_rule",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="payments", to="solicitors.bonusrule"),
        ),
    ]
