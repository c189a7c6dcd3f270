# solicitors/forms.py
from decimal import Decimal

from django import forms
from django.forms.models import model_to_dict

from crm.exceptions import ValidationError
from crm.models import Contact

from .models import BonusRule, Solicitor


# API (camelCase) name -> form field
SOLICITOR_FIELDS = {
    "contactId": "contact",
    "solicitorCode": "solicitor_code",
    "status": "status",
    "commissionRate": "commission_rate",
    "hireDate": "hire_date",
    "terminationDate": "termination_date",
    "locationId": "location_id",
    "notes": "notes",
}

BONUS_RULE_FIELDS = {
    "ruleName": "rule_name",
    "bonusPercentage": "bonus_percentage",
    "paymentType": "payment_type",
    "minAmount": "min_amount",
    "maxAmount": "max_amount",
    "effectiveFrom": "effective_from",
    "effectiveTo": "effective_to",
    "isActive": "is_active",
    "priority": "priority",
    "notes": "notes",
}


def form_data(body: dict, field_map: dict, instance=None, defaults=None) -> dict:
    """
    Translate a JSON body into form data.

    Unknown keys are rejected.  For updates the instance's current values
    fill in every field the body leaves out, so PUT behaves as a partial
    update.
    """
    unknown = sorted(set(body) - set(field_map))
    if unknown:
        raise ValidationError("Unknown field(s): " + ", ".join(unknown), fields=unknown)

    data = {}
    if instance is not None:
        data.update(model_to_dict(instance, fields=list(field_map.values())))
    elif defaults:
        data.update(defaults)

    for key, value in body.items():
        data[field_map[key]] = value

    return {k: ("" if v is None else v) for k, v in data.items()}


def raise_form_errors(form, field_map: dict):
    reverse = {v: k for k, v in field_map.items()}
    errors = {
        reverse.get(name, name): [str(message) for message in messages]
        for name, messages in form.errors.items()
    }
    raise ValidationError(fields=list(errors), errors=errors)


class SolicitorForm(forms.ModelForm):
    contact = forms.ModelChoiceField(queryset=Contact.objects.all())

    class Meta:
        model = Solicitor
        fields = [
            "contact", "solicitor_code", "status", "commission_rate",
            "hire_date", "termination_date", "location_id", "notes",
        ]

    def __init__(self, *args, contacts=None, **kwargs):
        super().__init__(*args, **kwargs)
        if contacts is not None:
            self.fields["contact"].queryset = contacts

    def clean_solicitor_code(self):
        return self.cleaned_data.get("solicitor_code") or None

    def clean_location_id(self):
        return self.cleaned_data.get("location_id") or None

    def clean_commission_rate(self):
        rate = self.cleaned_data.get("commission_rate")
        if rate is not None and not (Decimal("0") <= rate <= Decimal("100")):
            raise forms.ValidationError("Commission rate must be between 0 and 100.")
        return rate

    def clean(self):
        cleaned_data = super().clean()
        hire_date = cleaned_data.get("hire_date")
        termination_date = cleaned_data.get("termination_date")
        if hire_date and termination_date and termination_date < hire_date:
            self.add_error("termination_date", "Termination date cannot be before hire date.")
        return cleaned_data


class BonusRuleForm(forms.ModelForm):
    class Meta:
        model = BonusRule
        fields = [
            "rule_name", "bonus_percentage", "payment_type", "min_amount", "max_amount",
            "effective_from", "effective_to", "is_active", "priority", "notes",
        ]

    def clean_bonus_percentage(self):
        pct = self.cleaned_data.get("bonus_percentage")
        if pct is not None and not (Decimal("0") <= pct <= Decimal("100")):
            raise forms.ValidationError("Bonus percentage must be between 0 and 100.")
        return pct

    def clean(self):
        cleaned_data = super().clean()

        min_amount = cleaned_data.get("min_amount")
        max_amount = cleaned_data.get("max_amount")
        for field in ("min_amount", "max_amount"):
            value = cleaned_data.get(field)
            if value is not None and value < 0:
                self.add_error(field, "Amount bounds cannot be negative.")
        if min_amount is not None and max_amount is not None and min_amount > max_amount:
            self.add_error("max_amount", "Maximum amount must be greater than or equal to minimum amount.")

        effective_from = cleaned_data.get("effective_from")
        effective_to = cleaned_data.get("effective_to")
        if effective_from and effective_to and effective_to < effective_from:
            self.add_error("effective_to", "Effective end date cannot be before the start date.")

        return cleaned_data
