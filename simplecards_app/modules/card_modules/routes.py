# File: simplecards_app/modules/card_modules/routes.py
import io
import os

from flask import current_app, request
from flask_login import current_user, login_required

from . import modules_bp
from .services import get_modules_use_case
from ...core.error_handlers import ImportQueueClosedError, ValidationError, success_response
from ...core.worker_pool import WorkerPoolClosedError
from ...schemas import CreateOrUpdateModuleRequest, ModuleDraft, QuizletImportRequest
from ...utils.request_parsing import parse_json_body


@modules_bp.route('/', methods=['GET'])
@login_required
def get_all_modules():
    modules = get_modules_use_case().get_all_modules(current_user.uuid)
    return success_response(data=[module.to_dict() for module in modules])


@modules_bp.route('/', methods=['POST'])
@login_required
def create_module():
    req = parse_json_body(CreateOrUpdateModuleRequest)
    module = get_modules_use_case().create_new_module(current_user.uuid, req.name)
    return success_response(data=module.to_dict()), 201


@modules_bp.route('/import/quizlet', methods=['POST'])
@login_required
def import_module_from_quizlet():
    req = parse_json_body(QuizletImportRequest)
    module = ModuleDraft(name=req.module_name, user_uuid=current_user.uuid)

    try:
        get_modules_use_case().queue_quizlet_module_import(module, req.quizlet_module_id)
    except WorkerPoolClosedError as exc:
        current_app.logger.error(f"quizlet module import queue failed: {exc}")
        raise ImportQueueClosedError()

    return success_response(message='Import has been queued')


@modules_bp.route('/import/csv', methods=['POST'])
@login_required
def import_module_from_csv():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise ValidationError('CSV file is required', errors=[{'field': 'file', 'message': 'missing'}])

    # Tên module = tên file bỏ phần mở rộng
    filename = os.path.basename(upload.filename.replace('\\', '/'))
    module = ModuleDraft(name=os.path.splitext(filename)[0].strip(), user_uuid=current_user.uuid)

    # The request's own stream is gone once the response is sent
    stream = io.BytesIO(upload.read())

    try:
        get_modules_use_case().queue_csv_module_import(module, stream)
    except WorkerPoolClosedError as exc:
        stream.close()
        current_app.logger.error(f"csv module import queue failed: {exc}")
        raise ImportQueueClosedError()

    return success_response(message='Import has been queued')


@modules_bp.route('/<module_uuid>/', methods=['GET'])
@login_required
def get_module_with_cards(module_uuid):
    module_with_cards = get_modules_use_case().get_module_with_cards(current_user.uuid, module_uuid)
    return success_response(data=module_with_cards)


@modules_bp.route('/<module_uuid>/', methods=['PUT'])
@login_required
def update_module(module_uuid):
    req = parse_json_body(CreateOrUpdateModuleRequest)
    module = get_modules_use_case().update_module(current_user.uuid, module_uuid, req.name)
    return success_response(data=module.to_dict())


@modules_bp.route('/<module_uuid>/', methods=['DELETE'])
@login_required
def delete_module(module_uuid):
    get_modules_use_case().delete_module(current_user.uuid, module_uuid)
    return success_response(message='Deleted'), 202
