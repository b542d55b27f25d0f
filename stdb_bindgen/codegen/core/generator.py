"""
Base generator interface for all code generation targets.

Defines the contract that all language backends must implement: five
operations, one per entity category, each returning named output files.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional
from pathlib import Path

from .config import GeneratorConfig
from .schema import ModuleDef, ProcedureDef, ReducerDef, TableDef, TypeDef
from .templates import TemplateEngine, create_template_engine
from ...logging_config import get_logger

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass(frozen=True)
class OutputFile:
    """A generated file: its name and full contents."""

    filename: str
    code: str


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    # Entity operations

    @abstractmethod
    def generate_table_file(self, module: ModuleDef, table: TableDef) -> OutputFile:
        """Generate the binding file for one table."""
        pass

    @abstractmethod
    def generate_type_files(self, module: ModuleDef, type_def: TypeDef) -> List[OutputFile]:
        """Generate the file(s) for one exported type definition."""
        pass

    @abstractmethod
    def generate_reducer_file(self, module: ModuleDef, reducer: ReducerDef) -> OutputFile:
        """Generate the client call shim for one reducer."""
        pass

    @abstractmethod
    def generate_procedure_file(
        self, module: ModuleDef, procedure: ProcedureDef
    ) -> OutputFile:
        """Generate the client call shim for one procedure."""
        pass

    @abstractmethod
    def generate_global_files(self, module: ModuleDef) -> List[OutputFile]:
        """Generate module-wide files (client wrapper, schema registry)."""
        pass

    def generate(self, module: ModuleDef) -> List[OutputFile]:
        """
        Generate every output file for a module.

        Files are produced in a fixed order: tables, types, reducers,
        procedures, then global files. Each entity is rendered
        independently from the read-only module.

        Args:
            module: Resolved module schema

        Returns:
            Generated files in emission order
        """
        include_private = self.config.include_private
        files: List[OutputFile] = []

        for table in module.iter_tables(include_private):
            logger.debug("Rendering table %s", table.name)
            files.append(self.generate_table_file(module, table))

        for type_def in module.iter_types():
            logger.debug("Rendering type %s", type_def.scoped_name)
            files.extend(self.generate_type_files(module, type_def))

        for reducer in module.iter_reducers(include_private):
            logger.debug("Rendering reducer %s", reducer.name)
            files.append(self.generate_reducer_file(module, reducer))

        for procedure in module.iter_procedures(include_private):
            logger.debug("Rendering procedure %s", procedure.name)
            files.append(self.generate_procedure_file(module, procedure))

        files.extend(self.generate_global_files(module))
        return files

    def validate_module(self, module: ModuleDef) -> List[str]:
        """
        Check a module for issues worth reporting.

        Language generators can override this to add their own checks.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        exported = {type_def.ty for type_def in module.types}
        for table in module.tables:
            if table.product_type_ref not in exported:
                warnings.append(
                    f"Table '{table.name}' row type {table.product_type_ref} "
                    f"has no exported name"
                )

        skipped = [r.name for r in module.reducers if r.lifecycle is not None]
        if skipped:
            warnings.append(
                f"Lifecycle reducers are not client-callable and were skipped: "
                f"{', '.join(sorted(skipped))}"
            )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply basic cleanup to generated code.

        Strips trailing whitespace and collapses runs of more than two
        blank lines.
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: List[OutputFile],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated files
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def filenames(self) -> List[str]:
        return [f.filename for f in self.files]

    def get_file(self, filename: str) -> Optional[OutputFile]:
        for output in self.files:
            if output.filename == filename:
                return output
        return None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files=[])
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, module: ModuleDef) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        module: Module schema to generate bindings for

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    try:
        warnings = generator.validate_module(module)
        for warning in warnings:
            logger.warning(warning)

        files = [
            OutputFile(f.filename, generator.format_code(f.code))
            for f in generator.generate(module)
        ]

        seen = set()
        for output in files:
            if output.filename in seen:
                warnings.append(
                    f"Duplicate output file {output.filename}; later output wins"
                )
            seen.add(output.filename)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "file_count": len(files),
            "table_count": len(module.tables),
            "type_count": len(module.types),
            "reducer_count": len(module.reducers),
            "procedure_count": len(module.procedures),
        }

        logger.info(
            "Generated %d %s file(s) for %d type(s)",
            len(files),
            generator.language_name,
            len(module.types),
        )
        return GenerationResult(files, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
