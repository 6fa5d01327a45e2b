# File: simplecards_app/modules/cards/routes.py
from flask_login import current_user, login_required

from . import cards_bp
from .services import get_cards_use_case
from ..card_modules.services import get_modules_use_case
from ...core.error_handlers import NotFoundError, success_response
from ...schemas import CreateCardRequest, UpdateCardRequest
from ...utils.request_parsing import parse_json_body


def _require_own_module(module_uuid: str) -> None:
    if not get_modules_use_case().module_exists(current_user.uuid, module_uuid):
        raise NotFoundError(f'module with uuid="{module_uuid}" does not exist', resource='module')


@cards_bp.route('/', methods=['GET'])
@login_required
def get_module_cards(module_uuid):
    _require_own_module(module_uuid)
    cards = get_cards_use_case().get_module_cards(module_uuid)
    return success_response(data=[card.to_dict() for card in cards])


@cards_bp.route('/', methods=['POST'])
@login_required
def create_card(module_uuid):
    _require_own_module(module_uuid)
    req = parse_json_body(CreateCardRequest)
    card = get_cards_use_case().create_card(module_uuid, req.term, req.meaning)
    return success_response(data=card.to_dict()), 201


@cards_bp.route('/<card_uuid>', methods=['PUT'])
@login_required
def save_card(module_uuid, card_uuid):
    _require_own_module(module_uuid)
    req = parse_json_body(UpdateCardRequest)
    card = get_cards_use_case().save_card(module_uuid, card_uuid, term=req.term, meaning=req.meaning)
    return success_response(data=card.to_dict())


@cards_bp.route('/<card_uuid>', methods=['DELETE'])
@login_required
def delete_card(module_uuid, card_uuid):
    _require_own_module(module_uuid)
    get_cards_use_case().delete_card(module_uuid, card_uuid)
    return success_response(message='Deleted'), 202
