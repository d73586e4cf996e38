# machinery_site/api/payload.py
# Turns JSON request bodies into form data the WTForms classes can validate.

from flask import abort, jsonify, request
from werkzeug.datastructures import MultiDict

# camelCase keys accepted from the admin UI and the public forms
FIELD_ALIASES = {
    'modelNumber': 'model_number',
    'parentId': 'parent_id',
    'isActive': 'is_active',
    'isPublished': 'is_published',
    'formType': 'form_type',
    'machineType': 'machine_type',
    'machineMake': 'machine_make',
    'machineModel': 'machine_model',
    'machineYear': 'machine_year',
    'machineCondition': 'machine_condition',
    'additionalInfo': 'additional_info',
}


def json_payload():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description='Request body must be a JSON object')
    return {FIELD_ALIASES.get(key, key): value for key, value in payload.items()}


def form_data(values):
    """Flattens scalar JSON values into form data WTForms can coerce."""
    data = MultiDict()
    for key, value in values.items():
        if value is None or isinstance(value, (list, dict)):
            continue
        if isinstance(value, bool):
            data[key] = 'y' if value else ''
        else:
            data[key] = str(value)
    return data


def validation_error(form):
    return jsonify({'error': 'Validation failed', 'details': form.errors}), 400


def form_fields(form):
    return {name: field.data for name, field in form._fields.items()}
