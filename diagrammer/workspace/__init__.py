from diagrammer.workspace.store import ArtifactStore, WorkspaceNotFoundError

__all__ = ["ArtifactStore", "WorkspaceNotFoundError"]
