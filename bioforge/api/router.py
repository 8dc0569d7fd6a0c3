"""
BioForge API Endpoints

Local single-user surface over one process-wide AppState.

GET  /api/v1/health                 - Health check
GET  /api/v1/catalog                - Seed catalog and builder library
POST /api/v1/import/preview         - Parse text/JSON without committing
POST /api/v1/import/commit          - Parse and store (optionally plan/module)
POST /api/v1/quick-add              - One conversational line -> phase 0
POST /api/v1/command                - Command palette line (stacks allowed)
GET  /api/v1/plan                   - Current plan (focus filtered via /plan/filtered)
GET  /api/v1/protocol               - Generated protocol
GET  /api/v1/synergy                - Synergy graph
GET  /api/v1/export/backup          - Backup bundle

Mutations answer {"success": true, "applied": <bool>}; applied is false for
the silent no-ops of the plan store.

Version: api_v1
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bioforge import __version__
from bioforge.catalog.models import PlanBlockType
from bioforge.catalog.organs import ORGANS
from bioforge.derive.body_map import blocks_by_organ, organ_connection_strength, organ_detail
from bioforge.derive.protocol import generate_doctor_script_for_peptide, generate_protocol
from bioforge.derive.synergy import get_synergy_graph_data
from bioforge.importers.json_parser import parse_knowledge_import_json
from bioforge.importers.preview import preview_import
from bioforge.importers.text_parser import parse_knowledge_import_text
from bioforge.plans.models import FocusMode, PlanBlockDraft
from bioforge.session import AppState
from bioforge.storage.errors import StateSchemaError, StateStoreError
from bioforge.tracking.logs import biomarker_timeline, loggable_blocks
from bioforge.tracking.models import DoseLogEntry

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["bioforge"],
)

_state: Optional[AppState] = None


def get_state() -> AppState:
    """Process-wide state, restored from the configured backend on first use."""
    global _state
    if _state is None:
        _state = AppState.from_settings()
    return _state


def reset_state() -> None:
    global _state
    _state = None


def register_error_handlers(app: FastAPI) -> None:
    """Map storage failures to HTTP errors."""

    @app.exception_handler(StateStoreError)
    async def _state_store_error(request: Request, exc: StateStoreError):
        status_code = 422 if isinstance(exc, StateSchemaError) else 503
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def _applied(applied: bool, **extra) -> Dict[str, Any]:
    return {"success": True, "applied": bool(applied), **extra}


def _plan_blob(state: AppState) -> Optional[Dict[str, Any]]:
    plan = state.current_plan
    return plan.to_blob() if plan else None


# =============================================================================
# Request models
# =============================================================================

class ImportRequest(BaseModel):
    raw: str
    source_format: str = Field(default="text", description="text | json")


class ImportCommitRequest(ImportRequest):
    add_to_plan: bool = False
    phase_index: int = 0
    module_name: Optional[str] = Field(
        default=None,
        description="When set, the imported items are grouped as a saved module"
    )


class TextRequest(BaseModel):
    text: str


class BlockRequest(BaseModel):
    phase_index: int
    week_index: int = 0
    block: PlanBlockDraft


class MoveBlockRequest(BaseModel):
    from_phase: int
    block_id: str
    to_phase: int
    to_week_index: int = 0


class OrganTagRequest(BaseModel):
    organ_id: str


class LibraryPlacementRequest(BaseModel):
    phase_index: int
    item_id: str


class NameRequest(BaseModel):
    name: str


class BlocksRequest(BaseModel):
    blocks: List[PlanBlockDraft]
    name: Optional[str] = None
    phase_index: int = 0


class FocusRequest(BaseModel):
    mode: FocusMode
    module_id: Optional[str] = None


class CompendiumItemRequest(BaseModel):
    name: str
    type: PlanBlockType
    ref_id: Optional[str] = None
    dose_examples: Optional[List[str]] = None
    moa: Optional[str] = None
    personal_notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class CompendiumPlacementRequest(BaseModel):
    phase_index: int = 0
    item_ids: List[str]


class ModuleRequest(BaseModel):
    name: str
    item_ids: List[str]


class BiomarkerLogRequest(BaseModel):
    date: str
    biomarker_id: str
    biomarker_name: str
    value: float
    unit: Optional[str] = None


class SymptomRequest(BaseModel):
    date: str
    text: str


class RetestAlertRequest(BaseModel):
    biomarker_id: str
    biomarker_name: str
    due_date: str


class SettingsRequest(BaseModel):
    supabase_sync: Optional[bool] = None
    pwa_installed: Optional[bool] = None


# =============================================================================
# Health and catalog
# =============================================================================

@router.get("/health")
def health():
    return {
        "status": "ok",
        "module": "bioforge",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/catalog")
def catalog(state: AppState = Depends(get_state)):
    library = state.catalog.library()
    return {
        "version": state.catalog.version,
        "data": state.catalog.data.model_dump(mode="json", by_alias=True),
        "library": {k: [i.model_dump(mode="json") for i in v] for k, v in library.items()},
        "organs": [{"id": o.id, "label": o.label} for o in ORGANS],
    }


# =============================================================================
# Import and quick add
# =============================================================================

@router.post("/import/preview")
def import_preview(request: ImportRequest, state: AppState = Depends(get_state)):
    preview = preview_import(request.raw, request.source_format, state.catalog)
    return preview.to_dict()


@router.post("/import/commit")
def import_commit(request: ImportCommitRequest, state: AppState = Depends(get_state)):
    if request.source_format == "json":
        parsed = parse_knowledge_import_json(request.raw, state.catalog)
    else:
        parsed = parse_knowledge_import_text(request.raw, state.catalog)

    if request.module_name:
        module = state.save_import_as_module(request.module_name, parsed)
        if module is None:
            raise HTTPException(status_code=400, detail="Module needs a name and at least one item")
        return {"success": True, "module": module.to_blob(), "count": len(module.item_ids)}

    items = state.import_parsed_items(
        parsed,
        add_to_plan=request.add_to_plan,
        phase_index=request.phase_index,
    )
    return {"success": True, "items": [i.to_blob() for i in items], "count": len(items)}


@router.post("/quick-add")
def quick_add(request: TextRequest, state: AppState = Depends(get_state)):
    item = state.quick_add(request.text)
    if item is None:
        raise HTTPException(status_code=400, detail="Nothing to add")
    return {"success": True, "item": item.to_blob()}


@router.post("/command")
def run_command(request: TextRequest, state: AppState = Depends(get_state)):
    items = state.run_command(request.text)
    return {
        "success": True,
        "items": [i.to_blob() for i in items],
        "recent_searches": state.recent_command_searches,
    }


# =============================================================================
# Compendium
# =============================================================================

@router.get("/compendium")
def list_compendium(state: AppState = Depends(get_state)):
    return {
        "items": [i.to_blob() for i in state.compendium.items],
        "modules": [m.to_blob() for m in state.compendium.modules],
    }


@router.post("/compendium/seed")
def seed_compendium(state: AppState = Depends(get_state)):
    return _applied(state.ensure_compendium_seed(), count=len(state.compendium.items))


@router.post("/compendium/items")
def add_compendium_item(request: CompendiumItemRequest, state: AppState = Depends(get_state)):
    item = state.compendium.add_item(request.model_dump())
    return {"success": True, "item": item.to_blob()}


@router.patch("/compendium/items/{item_id}")
def update_compendium_item(item_id: str, patch: Dict[str, Any], state: AppState = Depends(get_state)):
    return _applied(state.compendium.update_item(item_id, patch))


@router.delete("/compendium/items/{item_id}")
def remove_compendium_item(item_id: str, state: AppState = Depends(get_state)):
    return _applied(state.compendium.remove_item(item_id))


@router.post("/compendium/add-to-plan")
def add_compendium_items_to_plan(request: CompendiumPlacementRequest, state: AppState = Depends(get_state)):
    count = state.add_compendium_items_to_plan(request.phase_index, request.item_ids)
    return _applied(count > 0, count=count, plan=_plan_blob(state))


@router.post("/compendium/modules")
def add_module(request: ModuleRequest, state: AppState = Depends(get_state)):
    module = state.compendium.add_module(request.name, request.item_ids)
    return {"success": True, "module": module.to_blob()}


@router.delete("/compendium/modules/{module_id}")
def remove_module(module_id: str, state: AppState = Depends(get_state)):
    return _applied(state.compendium.remove_module(module_id))


# =============================================================================
# Current plan
# =============================================================================

@router.get("/plan")
def get_plan(state: AppState = Depends(get_state)):
    return {"plan": _plan_blob(state)}


@router.get("/plan/filtered")
def get_filtered(state: AppState = Depends(get_state)):
    plan = state.filtered_plan()
    return {
        "focus_mode": state.focus_mode.value,
        "focus_module_id": state.focus_module_id,
        "plan": plan.to_blob() if plan else None,
    }


@router.put("/focus")
def set_focus(request: FocusRequest, state: AppState = Depends(get_state)):
    state.set_focus_mode(request.mode, request.module_id)
    return _applied(True, focus_mode=state.focus_mode.value)


@router.post("/plan/blocks")
def add_block(request: BlockRequest, state: AppState = Depends(get_state)):
    applied = state.plans.add_block_to_phase(request.phase_index, request.week_index, request.block)
    return _applied(applied, plan=_plan_blob(state))


@router.delete("/plan/phases/{phase_index}/blocks/{block_id}")
def remove_block(phase_index: int, block_id: str, state: AppState = Depends(get_state)):
    return _applied(state.plans.remove_block(phase_index, block_id), plan=_plan_blob(state))


@router.post("/plan/blocks/move")
def move_block(request: MoveBlockRequest, state: AppState = Depends(get_state)):
    applied = state.plans.move_block(
        request.from_phase, request.block_id, request.to_phase, request.to_week_index
    )
    return _applied(applied, plan=_plan_blob(state))


@router.post("/plan/blocks/{block_id}/organs")
def tag_block_organ(block_id: str, request: OrganTagRequest, state: AppState = Depends(get_state)):
    return _applied(state.tag_block_organ(block_id, request.organ_id), plan=_plan_blob(state))


@router.post("/plan/library")
def add_library_item(request: LibraryPlacementRequest, state: AppState = Depends(get_state)):
    item = state.catalog.find_library_item(request.item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Library item {request.item_id} not found")
    return _applied(state.add_library_item_to_phase(request.phase_index, item), plan=_plan_blob(state))


# =============================================================================
# Saved plans
# =============================================================================

@router.get("/plans")
def list_plans(state: AppState = Depends(get_state)):
    return {
        "current_plan_id": state.current_plan.id if state.current_plan else None,
        "plans": [p.to_blob() for p in state.plans.saved_plans],
    }


@router.post("/plans/save")
def save_plan(request: NameRequest, state: AppState = Depends(get_state)):
    plan = state.plans.save_current_plan(request.name)
    if plan is None:
        raise HTTPException(status_code=409, detail="No current plan to save")
    return {"success": True, "plan": plan.to_blob()}


@router.post("/plans/{plan_id}/load")
def load_plan(plan_id: str, state: AppState = Depends(get_state)):
    if not state.plans.load_plan(plan_id):
        raise HTTPException(status_code=404, detail=f"Plan {plan_id} not found")
    return {"success": True, "plan": _plan_blob(state)}


@router.delete("/plans/{plan_id}")
def delete_plan(plan_id: str, state: AppState = Depends(get_state)):
    return _applied(state.plans.delete_plan(plan_id))


@router.post("/plans/{plan_id}/duplicate")
def duplicate_plan(plan_id: str, state: AppState = Depends(get_state)):
    plan = state.plans.duplicate_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"Plan {plan_id} not found")
    return {"success": True, "plan": plan.to_blob()}


@router.post("/plans/from-blocks")
def create_plan_from_blocks(request: BlocksRequest, state: AppState = Depends(get_state)):
    plan = state.plans.create_plan_from_blocks(request.blocks, request.name)
    return {"success": True, "plan": plan.to_blob()}


@router.post("/plans/{plan_id}/append")
def append_blocks(plan_id: str, request: BlocksRequest, state: AppState = Depends(get_state)):
    return _applied(state.plans.append_blocks_to_plan(plan_id, request.blocks, request.phase_index))


# =============================================================================
# Derived views
# =============================================================================

@router.get("/protocol")
def get_protocol(state: AppState = Depends(get_state)):
    protocol = generate_protocol(state.current_plan, state.catalog)
    return {"protocol": protocol.model_dump(mode="json") if protocol else None}


@router.get("/protocol/doctor-script/{peptide_id}")
def doctor_script(peptide_id: str, state: AppState = Depends(get_state)):
    script = generate_doctor_script_for_peptide(peptide_id, state.catalog)
    if not script:
        raise HTTPException(status_code=404, detail=f"Peptide {peptide_id} not found")
    return {"peptide_id": peptide_id, "script": script}


@router.get("/synergy")
def synergy_graph(state: AppState = Depends(get_state)):
    graph = get_synergy_graph_data(state.current_plan, state.catalog)
    return {"graph": graph.model_dump(mode="json") if graph else None}


@router.get("/body-map")
def body_map(state: AppState = Depends(get_state)):
    plan = state.current_plan
    return {
        "organs": {
            organ_id: [ref.model_dump(mode="json") for ref in refs]
            for organ_id, refs in blocks_by_organ(plan).items()
        },
        "connections": organ_connection_strength(plan),
    }


@router.get("/body-map/{organ_id}")
def body_map_organ(organ_id: str, chemical_load: bool = False, state: AppState = Depends(get_state)):
    detail = organ_detail(state.current_plan, organ_id, chemical_load=chemical_load)
    if detail is None:
        raise HTTPException(status_code=404, detail=f"Organ {organ_id} not found")
    return detail.model_dump(mode="json")


# =============================================================================
# Tracking
# =============================================================================

@router.get("/tracking/loggable")
def get_loggable_blocks(state: AppState = Depends(get_state)):
    return {"blocks": [b.to_blob() for b in loggable_blocks(state.current_plan)]}


@router.post("/tracking/doses")
def log_dose(entry: DoseLogEntry, state: AppState = Depends(get_state)):
    state.tracking.log_dose(entry)
    return _applied(True, taken_count=state.tracking.taken_count(entry.date))


@router.get("/tracking/doses/{date}")
def doses_for_date(date: str, state: AppState = Depends(get_state)):
    return {
        "date": date,
        "entries": [e.to_blob() for e in state.tracking.doses_for_date(date)],
        "taken_count": state.tracking.taken_count(date),
    }


@router.post("/tracking/biomarkers")
def add_biomarker_log(request: BiomarkerLogRequest, state: AppState = Depends(get_state)):
    log = state.tracking.add_biomarker_log(**request.model_dump())
    return {"success": True, "log": log.to_blob()}


@router.get("/tracking/biomarkers/timeline")
def get_biomarker_timeline(state: AppState = Depends(get_state)):
    df = biomarker_timeline(state.tracking.biomarker_logs)
    df = df.astype(object).where(df.notna(), None)
    return {"series": [c for c in df.columns if c != "date"], "rows": df.to_dict(orient="records")}


@router.post("/tracking/symptoms")
def add_symptom(request: SymptomRequest, state: AppState = Depends(get_state)):
    entry = state.tracking.add_symptom(request.date, request.text)
    return {"success": True, "entry": entry.to_blob()}


@router.delete("/tracking/symptoms/{entry_id}")
def delete_symptom(entry_id: str, state: AppState = Depends(get_state)):
    return _applied(state.tracking.delete_symptom(entry_id))


@router.get("/tracking/retest-alerts")
def list_retest_alerts(state: AppState = Depends(get_state)):
    return {"alerts": [a.to_blob() for a in state.tracking.active_retest_alerts()]}


@router.post("/tracking/retest-alerts")
def add_retest_alert(request: RetestAlertRequest, state: AppState = Depends(get_state)):
    alert = state.tracking.add_retest_alert(**request.model_dump())
    return {"success": True, "alert": alert.to_blob()}


@router.post("/tracking/retest-alerts/{alert_id}/dismiss")
def dismiss_retest_alert(alert_id: str, state: AppState = Depends(get_state)):
    return _applied(state.tracking.dismiss_retest_alert(alert_id))


# =============================================================================
# Settings and export
# =============================================================================

@router.put("/settings")
def update_settings(request: SettingsRequest, state: AppState = Depends(get_state)):
    settings = state.set_settings(**request.model_dump(exclude_none=True))
    return {"success": True, "settings": settings.to_blob()}


@router.get("/export/backup")
def export_backup(state: AppState = Depends(get_state)):
    return state.backup_bundle().to_blob()


@router.get("/state")
def export_state(state: AppState = Depends(get_state)):
    return state.snapshot()
