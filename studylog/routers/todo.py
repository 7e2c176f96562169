from __future__ import annotations

from fastapi import APIRouter, Depends

from studylog.domain.schemas import Todo, TodoCreate, TodoUpdate
from studylog.routers.deps import get_todo_service, service_errors
from studylog.services.todo_service import TodoService

router = APIRouter(prefix="/api/todo", tags=["todo"])


@router.post("", response_model=Todo)
def add_todo(payload: TodoCreate, svc: TodoService = Depends(get_todo_service)):
    with service_errors("Failed to save todo"):
        return svc.add_todo(payload)


@router.get("", response_model=list[Todo])
def list_todos(svc: TodoService = Depends(get_todo_service)):
    with service_errors("Failed to fetch todos"):
        return svc.list_todos()


@router.get("/{todo_id}", response_model=Todo)
def get_todo(todo_id: str, svc: TodoService = Depends(get_todo_service)):
    with service_errors("Failed to fetch todo"):
        return svc.get_todo(todo_id)


@router.put("/{todo_id}", response_model=Todo)
def update_todo(todo_id: str, payload: TodoUpdate, svc: TodoService = Depends(get_todo_service)):
    with service_errors("Failed to update todo"):
        return svc.update_todo(todo_id, payload)


@router.delete("/{todo_id}")
def delete_todo(todo_id: str, svc: TodoService = Depends(get_todo_service)):
    with service_errors("Failed to delete todo"):
        svc.delete_todo(todo_id)
    return {"success": True, "message": "Todo deleted successfully"}


# The request body ({completed}) is accepted but not read.
@router.post("/{todo_id}/toggle", response_model=Todo)
def toggle_todo(todo_id: str, svc: TodoService = Depends(get_todo_service)):
    with service_errors("Failed to toggle todo"):
        return svc.toggle_todo(todo_id)
