"""Todo list use cases."""

from __future__ import annotations

from studylog.domain.schemas import Todo, TodoCreate, TodoUpdate, partial_fields
from studylog.services.errors import RecordNotFoundError

NOT_FOUND_MESSAGE = "Todo not found"


class TodoService:
    def __init__(self, store) -> None:
        self.store = store

    def list_todos(self) -> list[Todo]:
        return self.store.list_todos()

    def get_todo(self, todo_id: str) -> Todo:
        todo = self.store.get_todo(todo_id)
        if todo is None:
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)
        return todo

    def add_todo(self, payload: TodoCreate) -> Todo:
        return self.store.add_todo(payload)

    def update_todo(self, todo_id: str, payload: TodoUpdate) -> Todo:
        todo = self.store.update_todo(todo_id, partial_fields(payload))
        if todo is None:
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)
        return todo

    def delete_todo(self, todo_id: str) -> None:
        if not self.store.delete_todo(todo_id):
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)

    def toggle_todo(self, todo_id: str) -> Todo:
        """Flip the stored completion flag; whatever the client sent is ignored."""
        todo = self.store.toggle_todo(todo_id)
        if todo is None:
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)
        return todo
