from marshmallow import Schema, fields, validate

from models.schemas.book import BookSummarySchema
from models.schemas.common import validate_not_blank


class CategoryCreateSchema(Schema):
    name = fields.String(required=True, validate=[validate.Length(max=64), validate_not_blank])


class CategoryUpdateSchema(Schema):
    name = fields.String(validate=[validate.Length(max=64), validate_not_blank])


class CategoryOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    books = fields.Nested(BookSummarySchema, many=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
