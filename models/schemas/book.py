from marshmallow import Schema, fields, validates, validate

from models.schemas.common import validate_not_future, validate_not_blank


class BookBaseSchema(Schema):
    title = fields.String(required=True, validate=[validate.Length(min=1, max=255), validate_not_blank])
    description = fields.String(allow_none=True)
    published_date = fields.Date(allow_none=True, data_key="publishedDate")
    available = fields.Boolean(load_default=True)
    author_id = fields.String(required=True, data_key="authorId")
    category_id = fields.String(required=True, data_key="categoryId")

    @validates("published_date")
    def _validate_published_date(self, value, **kwargs):
        validate_not_future(value)


class BookCreateSchema(BookBaseSchema):
    # Ask the text generator for a description when none is supplied
    generate_description = fields.Boolean(load_default=False, load_only=True, data_key="generateDescription")


class BookUpdateSchema(Schema):
    # All optional, but validate if present
    title = fields.String(validate=[validate.Length(min=1, max=255), validate_not_blank])
    description = fields.String(allow_none=True)
    published_date = fields.Date(allow_none=True, data_key="publishedDate")
    available = fields.Boolean()
    author_id = fields.String(data_key="authorId")
    category_id = fields.String(data_key="categoryId")

    @validates("published_date")
    def _validate_published_date(self, value, **kwargs):
        validate_not_future(value)


class GenerateDescriptionSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    author_name = fields.String(allow_none=True, data_key="authorName")
    category_name = fields.String(allow_none=True, data_key="categoryName")


class _RefSchema(Schema):
    id = fields.String()
    name = fields.String()


class BookSummarySchema(Schema):
    id = fields.String()
    title = fields.String()
    published_date = fields.Date(allow_none=True, data_key="publishedDate")
    available = fields.Boolean()


class BookOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    description = fields.String(allow_none=True)
    published_date = fields.Date(allow_none=True, data_key="publishedDate")
    available = fields.Boolean()
    author_id = fields.String(data_key="authorId")
    category_id = fields.String(data_key="categoryId")
    author = fields.Nested(_RefSchema, allow_none=True)
    category = fields.Nested(_RefSchema, allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
