from __future__ import annotations


class RecipeError(Exception):
    pass


class InvalidDraftError(RecipeError):
    def __init__(self, message: str = "draft is invalid", field: str | None = None):
        super().__init__(message)
        self.field = field


class RecipeNotFoundError(RecipeError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class RecipeRepositoryError(RecipeError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Recipe repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
