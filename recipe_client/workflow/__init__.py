"""Recipe upload workflow: the single entry point a UI talks to."""

from recipe_client.workflow.orchestrator import RecipeWorkflow, upload_recipe
from recipe_client.workflow.schemas import ClientState, WorkflowPhase

__all__ = ["RecipeWorkflow", "upload_recipe", "ClientState", "WorkflowPhase"]
