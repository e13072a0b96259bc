from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from fitflow.assembly import build_block_response
from fitflow.db import get_db
from fitflow.deps.auth import ensure_session_access, get_current_user, get_weight_unit
from fitflow.models import SessionBlock, User
from fitflow.repositories.block_repo import BlockRepository
from fitflow.repositories.session_repo import SessionRepository
from fitflow.schemas.session import BlockCreate, BlockExertion, BlockRead

router = APIRouter(prefix="/blocks", tags=["blocks"])

def _accessible_block(db: Session, block_id: int, current: User) -> SessionBlock:
    block = BlockRepository(db).get_tree(block_id)
    ensure_session_access(block.session, current)
    return block

@router.post("", response_model=BlockRead, status_code=status.HTTP_201_CREATED)
def add_block(
    payload: BlockCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    ensure_session_access(SessionRepository(db).get_or_raise(payload.session_id), current)
    block = BlockRepository(db).create(payload.session_id, group_id=payload.group_id)
    return build_block_response(block, unit)

@router.get("/{block_id}", response_model=BlockRead)
def get_block(
    block_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    return build_block_response(_accessible_block(db, block_id, current), unit)

@router.post("/{block_id}/start", response_model=BlockRead)
def start_block(
    block_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_block(db, block_id, current)
    return build_block_response(BlockRepository(db).start(block_id), unit)

@router.post("/{block_id}/complete", response_model=BlockRead)
def complete_block(
    block_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_block(db, block_id, current)
    return build_block_response(BlockRepository(db).complete(block_id), unit)

@router.post("/{block_id}/skip", response_model=BlockRead)
def skip_block(
    block_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_block(db, block_id, current)
    return build_block_response(BlockRepository(db).skip(block_id), unit)

@router.patch("/{block_id}/exertion", response_model=BlockRead)
def update_exertion(
    block_id: int,
    payload: BlockExertion,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_block(db, block_id, current)
    block = BlockRepository(db).update_exertion(block_id, perceived_exertion=payload.perceived_exertion)
    return build_block_response(block, unit)
