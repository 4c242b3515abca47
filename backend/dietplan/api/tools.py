from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from dietplan.database import get_db
from dietplan.exceptions import ToolNotFoundError
from dietplan.services.tool_registry import build_diet_tools, call_tool, describe_tools

router = APIRouter(
    prefix="/api/v1/tools",
    tags=["Tools"]
)


@router.get("")
def list_tools(db: Session = Depends(get_db)):
    """Name, description and parameter schema of every registered tool."""
    return describe_tools(build_diet_tools(db))


@router.post("/{name}")
def invoke_tool(name: str, args: Optional[Dict[str, Any]] = Body(default=None), db: Session = Depends(get_db)):
    try:
        result = call_tool(build_diet_tools(db), name, args or {})
    except ToolNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    return {"tool": name, "result": result}
