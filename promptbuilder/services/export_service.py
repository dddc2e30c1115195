"""ZIP export of a project's files."""

import io
import zipfile

from promptbuilder.core.normalizer import flatten_files
from promptbuilder.models.project import Project
from promptbuilder.services.deployment_service import slugify_project_name


def export_filename(project: Project) -> str:
    """Download name for a project's archive."""
    return f"{slugify_project_name(project.name)}.zip"


def build_project_archive(project: Project) -> bytes:
    """Build a deflated ZIP archive of the project's current snapshot."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for path, content in flatten_files(project.generated_code).items():
            archive.writestr(path.lstrip("/"), content)
    return buffer.getvalue()
