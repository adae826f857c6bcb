from marshmallow import Schema, fields, validates, validate

from models.schemas.book import BookSummarySchema
from models.schemas.common import validate_not_future, validate_not_blank


class AuthorCreateSchema(Schema):
    name = fields.String(required=True, validate=[validate.Length(max=128), validate_not_blank])
    biography = fields.String(allow_none=True)
    birth_date = fields.Date(allow_none=True, data_key="birthDate")

    @validates("birth_date")
    def _validate_birth_date(self, value, **kwargs):
        validate_not_future(value)


class AuthorUpdateSchema(Schema):
    name = fields.String(validate=[validate.Length(max=128), validate_not_blank])
    biography = fields.String(allow_none=True)
    birth_date = fields.Date(allow_none=True, data_key="birthDate")

    @validates("birth_date")
    def _validate_birth_date(self, value, **kwargs):
        validate_not_future(value)


class AuthorOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    biography = fields.String(allow_none=True)
    birth_date = fields.Date(allow_none=True, data_key="birthDate")
    books = fields.Nested(BookSummarySchema, many=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
