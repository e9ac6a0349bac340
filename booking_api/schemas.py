"""
Webservice parameter and return structures.

Parameter schemas are loaded from query strings or JSON bodies; return
schemas are dumped and fill in defaults for keys a record does not carry.
"""

from marshmallow import Schema, fields, validate, EXCLUDE
from marshmallow import ValidationError as MarshmallowValidationError

from .exceptions import ValidationError


class CategoryParamsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    coursecategoryid = fields.Integer(load_default=0)


class BookingSummarySchema(Schema):
    id = fields.Integer()
    name = fields.String()
    intro = fields.String(allow_none=True)
    bookingoptions = fields.Integer(dump_default=0)
    booked = fields.Integer(dump_default=0)
    waitinglist = fields.Integer(dump_default=0)
    reserved = fields.Integer(dump_default=0)


class CategorySummarySchema(Schema):
    id = fields.Integer(dump_default=0)
    name = fields.String(dump_default='')
    contextid = fields.Integer(dump_default=1)
    coursecount = fields.Integer(dump_default=0)
    description = fields.String(dump_default='', allow_none=True)
    path = fields.String(dump_default='')
    json = fields.String(dump_default='{}')


class FieldEntrySchema(Schema):
    id = fields.Integer(required=True)
    classname = fields.String(load_default='')
    checked = fields.Integer(load_default=0)
    necessary = fields.Integer(load_default=0)
    incompatible = fields.List(fields.Integer(), load_default=list)


class ConfiguredFieldsSchema(Schema):
    id = fields.Integer()
    capability = fields.String()
    json = fields.String()


class ConfiguredFieldsParamsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    contextid = fields.Integer(load_default=0)


class SaveConfiguredFieldsParamsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    contextid = fields.Integer(required=True)
    capability = fields.String(required=True, validate=validate.Length(min=1))
    json = fields.String(required=True)


class FieldStatusParamsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    fieldid = fields.Integer(required=True)
    userid = fields.Integer(load_default=0)
    contextid = fields.Integer(required=True)
    capability = fields.String(required=True, validate=validate.Length(min=1))


class TableActionParamsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Integer(load_default=0)
    data = fields.String(load_default='{}')


def load_params(schema, data):
    """Load request parameters, turning marshmallow errors into ValidationError."""
    try:
        return schema.load(dict(data))
    except MarshmallowValidationError as e:
        field_name = next(iter(e.messages), None)
        raise ValidationError(f'Invalid parameters: {e.messages}', field=field_name) from e
