"""
Condition tree API endpoints
"""
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from opsboard.domain.condition_tree import from_payload, label_tree, to_payload


router = APIRouter(prefix="/api/v1/conditions", tags=["conditions"])


# === Request/Response models ===

class ConditionsRequest(BaseModel):
    # any shape is accepted; from_payload normalises it
    conditions: Any = None


class ConditionsResponse(BaseModel):
    conditions: list[dict[str, Any]]


class LabelsResponse(BaseModel):
    labels: list[dict[str, Any]]


# === Endpoints ===

@router.post("/normalize", response_model=ConditionsResponse)
def normalize_conditions(req: ConditionsRequest):
    """Parse backend records into a tree and flatten them back"""
    tree = from_payload(req.conditions)
    return {"conditions": to_payload(tree)}


@router.post("/labels", response_model=LabelsResponse)
def condition_labels(req: ConditionsRequest):
    """Where/AND/OR labels for every node, nested like the tree"""
    return {"labels": label_tree(from_payload(req.conditions))}
