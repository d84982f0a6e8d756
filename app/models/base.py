from datetime import datetime, timezone
from typing import Any
from bson.dbref import DBRef
from bson.objectid import ObjectId
from mongoengine import Document, DateTimeField, ReferenceField


class BaseDocumentMixin:
    # Fields never rendered by to_output, whatever the caller asks for.
    private_fields: tuple[str, ...] = ()

    def _sanitize_value(self, value: Any) -> Any:
        if isinstance(value, Document):
            # References render as the bare id so a related document's
            # private fields cannot leak through it.
            return str(value.id)
        if isinstance(value, DBRef):
            return str(value.id)
        if isinstance(value, list):
            return [self._sanitize_value(v) for v in value]
        if isinstance(value, dict):
            return {k: self._sanitize_value(v) for k, v in value.items()}
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, ObjectId):
            return str(value)
        return value

    def to_output(self, fields=None, exclude=None):
        data: dict[str, Any] = {}
        exclude = set(exclude or []) | set(self.private_fields) | {"id"}
        fields = fields or self._fields.keys()

        for field in fields:
            if field in exclude:
                continue
            if isinstance(self._fields.get(field), ReferenceField):
                # Stored reference, not dereferenced: no query per document
                value = self._data.get(field)
            else:
                value = getattr(self, field)
            data[field] = self._sanitize_value(value)

        data["id"] = str(self.id)
        return data


class BaseDocument(Document, BaseDocumentMixin):
    created_at = DateTimeField(default=lambda: datetime.now(timezone.utc), null=False)
    updated_at = DateTimeField(default=lambda: datetime.now(timezone.utc), null=False)

    meta = {
        "abstract": True,
    }

    def save(self, *args, **kwargs):
        self.updated_at = datetime.now(timezone.utc)
        return super().save(*args, **kwargs)
