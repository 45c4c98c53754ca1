"""Domain exceptions raised by services and translated to HTTP errors by routes."""


class ProjectNotFoundError(Exception):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class FloorNotFoundError(Exception):
    def __init__(self, floor_id: str):
        self.floor_id = floor_id
        super().__init__(f"Floor not found: {floor_id}")


class FloorLevelConflictError(Exception):
    def __init__(self, level: int):
        self.level = level
        super().__init__(f"A floor already exists at level {level}")
