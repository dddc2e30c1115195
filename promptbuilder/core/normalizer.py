"""Project Normalizer.

Turns per-type generation results into a stored project record and keeps the
append-only version history.
"""

from typing import Any

from promptbuilder.core.exceptions import ValidationError
from promptbuilder.core.orchestrator import successful_results
from promptbuilder.core.storage import Storage, get_storage
from promptbuilder.models.generation import GeneratedCode, GenerationResult, ProjectType
from promptbuilder.models.project import (
    NewProject,
    Project,
    ProjectKind,
    ProjectVersion,
    Snapshot,
)
from promptbuilder.utils.logging import get_logger

logger = get_logger(__name__)

INITIAL_VERSION_DESCRIPTION = "Initial version"
UPDATED_VERSION_DESCRIPTION = "Updated version"

BOTH_TYPES = {ProjectType.WEBSITE, ProjectType.MOBILE_APP}


class ProjectNormalizer:
    """Builds project snapshots and records versions."""

    def __init__(self, storage: Storage | None = None):
        self.storage = storage or get_storage()

    def resolve(
        self, results: dict[ProjectType, GenerationResult]
    ) -> tuple[ProjectKind, Snapshot]:
        """Decide the project kind and snapshot from generation results.

        Failed types are ignored. A single success keeps its own type; two or
        more become a "both" project whose snapshot maps each type to its
        code, unmerged.

        Raises:
            ValidationError: If no type generated successfully.
        """
        succeeded = successful_results(results)
        if not succeeded:
            raise ValidationError(
                "No successfully generated code to save",
                field="generatedCode",
            )

        if len(succeeded) == 1:
            project_type, code = next(iter(succeeded.items()))
            return ProjectKind(project_type.value), code

        return ProjectKind.BOTH, succeeded

    async def create_project(
        self,
        owner_id: str,
        name: str,
        prompt: str,
        results: dict[ProjectType, GenerationResult],
        description: str | None = None,
        framework: str | None = None,
        version_description: str | None = None,
    ) -> Project:
        """Save generation results as a new project with its first version."""
        kind, snapshot = self.resolve(results)
        version = ProjectVersion(
            code=snapshot,
            description=version_description or INITIAL_VERSION_DESCRIPTION,
        )

        project = await self.storage.create_project(
            NewProject(
                owner_id=owner_id,
                name=name,
                description=description,
                prompt=prompt,
                type=kind,
                framework=framework or _framework_of(snapshot),
                generated_code=snapshot,
                versions=[version],
            )
        )
        await self.storage.record_prompt(owner_id, prompt, project.id)

        logger.info(
            "project.created",
            project_id=project.id,
            type=kind.value,
            versions=len(project.versions),
        )
        return project

    async def update_snapshot(
        self,
        project: Project,
        code: Snapshot,
        description: str | None = None,
        changes: dict[str, Any] | None = None,
    ) -> Project:
        """Replace the current snapshot and append a version in one write.

        ``changes`` holds other field updates applied in the same write.

        Raises:
            ValidationError: If the snapshot shape does not match the project kind.
        """
        self._check_shape(project, code)

        version = ProjectVersion(
            code=code,
            description=description or UPDATED_VERSION_DESCRIPTION,
        )
        updated = await self.storage.update_project(
            project.id,
            changes={**(changes or {}), "generated_code": code},
            new_version=version,
        )

        logger.info(
            "project.version_added",
            project_id=project.id,
            versions=len(updated.versions),
        )
        return updated

    def select_part(self, project: Project, target: ProjectType | None) -> GeneratedCode:
        """Get the code for one part of a project.

        For single-type projects ``target`` may be omitted; for "both"
        projects it selects which type's code is meant.

        Raises:
            ValidationError: If the target is missing or not part of the project.
        """
        if project.type != ProjectKind.BOTH:
            if target is not None and target.value != project.type.value:
                raise ValidationError(f"Project has no {target.value} code", field="target")
            return project.generated_code

        if target is None:
            raise ValidationError(
                "Please choose which part to update: website or mobile-app",
                field="target",
            )
        if target not in project.generated_code:
            raise ValidationError(f"Project has no {target.value} code", field="target")
        return project.generated_code[target]

    async def replace_part(
        self,
        project: Project,
        target: ProjectType | None,
        code: GeneratedCode,
        description: str | None = None,
    ) -> Project:
        """Store new code for one part of a project as a new version."""
        self.select_part(project, target)

        if project.type != ProjectKind.BOTH:
            return await self.update_snapshot(project, code, description)

        snapshot = {**project.generated_code, target: code}
        return await self.update_snapshot(project, snapshot, description)

    def _check_shape(self, project: Project, code: Snapshot) -> None:
        is_mapping = isinstance(code, dict)
        if project.type == ProjectKind.BOTH and (not is_mapping or set(code) != BOTH_TYPES):
            raise ValidationError(
                "A website + mobile app project needs code for each type",
                field="generatedCode",
            )
        if project.type != ProjectKind.BOTH and is_mapping:
            raise ValidationError(
                f"A {project.type.value} project takes a single code snapshot",
                field="generatedCode",
            )


def flatten_files(snapshot: Snapshot) -> dict[str, str]:
    """Flatten a snapshot into one file mapping for display, export or deploy.

    Files of "both" snapshots are namespaced by type
    (``website/index.html``, ``mobile-app/App.js``) so names never collide.
    """
    if isinstance(snapshot, GeneratedCode):
        return dict(snapshot.files)

    files: dict[str, str] = {}
    for project_type, code in snapshot.items():
        prefix = getattr(project_type, "value", project_type)
        for path, content in code.files.items():
            files[f"{prefix}/{path.lstrip('/')}"] = content
    return files


def _framework_of(snapshot: Snapshot) -> str | None:
    if isinstance(snapshot, GeneratedCode):
        return snapshot.framework
    return None
