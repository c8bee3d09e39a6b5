import html

import bleach
from rest_framework import serializers


def clean_text(value) -> str:
    # Drop every tag, then undo bleach's entity escaping so plain text stays plain
    cleaned = bleach.clean((value or '').strip(), tags=set(), attributes={}, strip=True)
    return html.unescape(cleaned).strip()


class SanitizedCharField(serializers.CharField):
    """CharField that strips markup; a value that cleans down to nothing counts as blank."""

    def to_internal_value(self, data):
        value = clean_text(super().to_internal_value(data))
        if not value and not self.allow_blank:
            self.fail('blank')
        return value


class AllergyListField(serializers.ListField):
    """Accepts a JSON list or the comma separated string the intake form sends."""
    child = serializers.CharField(allow_blank=True, max_length=100)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.split(',')
        items = super().to_internal_value(data)
        return [a for a in (clean_text(i) for i in items) if a]
