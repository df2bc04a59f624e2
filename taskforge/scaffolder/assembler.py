"""Assemble generated files into an installable two-part project tree.

``ProjectAssembler`` takes the flat list of files produced for every task and
returns the final ``(path, content)`` list:

1. **Partition** each file into the client or server bucket.
2. **Normalize** its path under ``frontend/src/`` or ``backend/src/``
   (migrations under ``backend/migrations/``), fixing extensions.
3. **Place** it, resolving collisions (identical duplicates are dropped,
   differing files are renamed ``<stem>-<n><ext>``).
4. **Synthesize** manifests, configs, bootstrap sources, READMEs, a
   components barrel when there are two or more components and, when
   both buckets are populated, the root ``package.json``, ``README.md`` and
   ``START`` scripts.

Assembly is pure: no I/O, clock or randomness, so the same input always
produces byte-identical output.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from taskforge.config import PortConfig
from taskforge.errors import AssemblyCollision
from taskforge.planner.models import FileType, GeneratedFile, TaskType
from taskforge.scaffolder.templates import TemplateRenderer
from taskforge.utils import pascal_case, sanitize_name


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class Bucket(str, Enum):
    """Half of the generated project a file belongs to."""
    CLIENT = "client"
    SERVER = "server"


BUCKET_ROOTS: dict[Bucket, str] = {Bucket.CLIENT: "frontend", Bucket.SERVER: "backend"}

ROOT_FILES = ("README.md", "package.json", "START.sh", "START.bat")

SYNTHESIZED = "synthesized"


class CollisionKind(str, Enum):
    """How a path collision was resolved."""
    DUPLICATE = "duplicate"     # identical content, later copy dropped
    RENAMED = "renamed"         # differing content, later copy renamed
    SUPPRESSED = "suppressed"   # generated file kept, synthesized file skipped


class ProjectFile(BaseModel):
    """One file of the assembled tree."""
    path: str = Field(..., description="Final path relative to the project root")
    content: str
    bucket: Optional[Bucket] = Field(default=None, description="None for root-level files")
    source: str = Field(default=SYNTHESIZED, description="Input path, or 'synthesized'")


class CollisionRecord(BaseModel):
    """A collision detected and resolved during assembly."""
    path: str
    kind: CollisionKind
    first_source: str
    second_source: str
    renamed_to: Optional[str] = None


class AssembledProject(BaseModel):
    """Result of ``ProjectAssembler.assemble_with_report``."""
    project_name: str
    files: list[ProjectFile] = Field(default_factory=list)
    buckets: list[Bucket] = Field(default_factory=list)
    collisions: list[CollisionRecord] = Field(default_factory=list)

    def as_pairs(self) -> list[tuple[str, str]]:
        return [(f.path, f.content) for f in self.files]

    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    def get(self, path: str) -> Optional[str]:
        """Content at *path*, or ``None``."""
        for f in self.files:
            if f.path == path:
                return f.content
        return None

    def summary(self) -> str:
        generated = sum(1 for f in self.files if f.source != SYNTHESIZED)
        buckets = ", ".join(BUCKET_ROOTS[b] for b in self.buckets) or "none"
        return (
            f"{len(self.files)} files ({generated} generated, "
            f"{len(self.files) - generated} synthesized); buckets: {buckets}; "
            f"collisions: {len(self.collisions)}"
        )


# ---------------------------------------------------------------------------
# Dependency tables
# ---------------------------------------------------------------------------

PINNED_VERSIONS: dict[str, str] = {
    "react": "^18.2.0",
    "react-dom": "^18.2.0",
    "react-router-dom": "^6.21.0",
    "axios": "^1.6.2",
    "typescript": "^5.3.3",
    "vite": "^5.0.8",
    "@vitejs/plugin-react": "^4.2.1",
    "@types/react": "^18.2.43",
    "@types/react-dom": "^18.2.17",
    "express": "^4.18.2",
    "cors": "^2.8.5",
    "dotenv": "^16.3.1",
    "bcrypt": "^5.1.1",
    "bcryptjs": "^2.4.3",
    "jsonwebtoken": "^9.0.2",
    "express-rate-limit": "^7.1.5",
    "express-validator": "^7.0.1",
    "helmet": "^7.1.0",
    "morgan": "^1.10.0",
    "pg": "^8.11.3",
    "mongoose": "^8.0.3",
    "uuid": "^9.0.1",
    "zod": "^3.22.4",
    "joi": "^17.11.0",
    "ts-node-dev": "^2.0.0",
    "@types/node": "^20.10.5",
    "@types/express": "^4.17.21",
    "@types/cors": "^2.8.17",
    "@types/bcrypt": "^5.0.2",
    "@types/bcryptjs": "^2.4.6",
    "@types/jsonwebtoken": "^9.0.5",
    "@types/morgan": "^1.9.9",
    "@types/pg": "^8.10.9",
    "@types/uuid": "^9.0.7",
}

# Runtime packages whose typings ship separately.
TYPE_PACKAGES: dict[str, str] = {
    "bcrypt": "@types/bcrypt",
    "bcryptjs": "@types/bcryptjs",
    "jsonwebtoken": "@types/jsonwebtoken",
    "morgan": "@types/morgan",
    "pg": "@types/pg",
    "uuid": "@types/uuid",
}

_BASE_DEPENDENCIES: dict[Bucket, tuple[tuple[str, ...], tuple[str, ...]]] = {
    Bucket.CLIENT: (
        ("react", "react-dom"),
        ("@types/react", "@types/react-dom", "@vitejs/plugin-react", "typescript", "vite"),
    ),
    Bucket.SERVER: (
        ("cors", "dotenv", "express"),
        ("@types/cors", "@types/express", "@types/node", "ts-node-dev", "typescript"),
    ),
}

_NODE_BUILTINS = frozenset({
    "assert", "buffer", "child_process", "cluster", "crypto", "dgram", "dns",
    "events", "fs", "http", "http2", "https", "net", "os", "path", "perf_hooks",
    "process", "querystring", "readline", "stream", "string_decoder", "timers",
    "tls", "url", "util", "v8", "vm", "worker_threads", "zlib",
})


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_SCRIPT_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
_CLIENT_SUFFIXES = (".tsx", ".jsx", ".css")
_CLIENT_PATH_KEYWORDS = ("component", "client")
_SERVER_PATH_KEYWORDS = ("controller", "model", "route", "middleware", "server")
_BUCKET_PREFIXES = ("frontend/", "client/", "backend/", "server/")
_COMPONENT_DIRS = ("components", "pages", "views")
_COMPONENT_SUFFIX_WORDS = ("Component", "Page", "View")

_RE_REACT_IMPORT = re.compile(r"""\bfrom\s+['"]react['"]|\bimport\s+React\b""")
_RE_MODULE_SPECIFIER = re.compile(
    r"""(?:\bfrom|\bimport|\brequire\s*\(|\bimport\s*\()\s*['"]([^'"\s]+)['"]"""
)
_RE_PACKAGE_NAME = re.compile(r"^(?:@[a-z0-9][\w.-]*/)?[a-z0-9][\w.-]*$")
_RE_DEFAULT_EXPORT = re.compile(r"^\s*export\s+default\b", re.MULTILINE)

_CLIENT_ENTRIES = ("frontend/src/main.tsx", "frontend/src/index.tsx")
_SERVER_ENTRIES = ("backend/src/server.ts", "backend/src/index.ts", "backend/src/app.ts")

_MIDDLEWARE_EXPORTS = {
    "error_handler": ("backend/src/middleware/errorHandler.ts", "errorHandler"),
    "request_logger": ("backend/src/middleware/requestLogger.ts", "requestLogger"),
}


# ---------------------------------------------------------------------------
# Partitioning and normalization
# ---------------------------------------------------------------------------

def partition(file: GeneratedFile) -> Bucket:
    """Pick a bucket by type, then extension, path, origin and content."""
    if file.type is FileType.COMPONENT:
        return Bucket.CLIENT
    if file.type in (FileType.API, FileType.SCHEMA):
        return Bucket.SERVER

    suffix = PurePosixPath(file.path).suffix.lower()
    if suffix in _CLIENT_SUFFIXES:
        return Bucket.CLIENT
    if suffix == ".sql":
        return Bucket.SERVER

    lowered = file.path.lower()
    if any(keyword in lowered for keyword in _CLIENT_PATH_KEYWORDS):
        return Bucket.CLIENT
    if any(keyword in lowered for keyword in _SERVER_PATH_KEYWORDS):
        return Bucket.SERVER

    if file.origin is TaskType.FRONTEND:
        return Bucket.CLIENT
    if file.origin is TaskType.BACKEND:
        return Bucket.SERVER

    return Bucket.CLIENT if _RE_REACT_IMPORT.search(file.content) else Bucket.SERVER


def strip_path(path: str) -> str:
    """Drop leading ``./`` and ``/``, one bucket prefix, and ``src/``."""
    cleaned = path.strip().replace("\\", "/")
    parts = [part for part in cleaned.split("/") if part not in ("", ".", "..")]
    cleaned = "/".join(parts)
    for prefix in _BUCKET_PREFIXES:
        if cleaned.lower().startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break
    if cleaned.startswith("src/"):
        cleaned = cleaned[len("src/"):]
    return cleaned


def _looks_like_component(relative: str) -> bool:
    path = PurePosixPath(relative)
    stem = path.stem
    if stem.endswith(_COMPONENT_SUFFIX_WORDS):
        return True
    in_component_dir = any(part in _COMPONENT_DIRS for part in path.parts[:-1])
    return in_component_dir and stem[:1].isupper()


def normalize_path(path: str, bucket: Bucket) -> str:
    """Final path for a file of *bucket* originally at *path*."""
    relative = strip_path(path) or "index"
    pure = PurePosixPath(relative)
    suffix = pure.suffix.lower()

    if bucket is Bucket.CLIENT:
        if not suffix:
            relative += ".tsx" if _looks_like_component(relative) else ".ts"
        elif suffix in (".ts", ".js") and _looks_like_component(relative):
            relative = str(pure.with_suffix(".tsx"))
        return f"frontend/src/{relative}"

    if suffix == ".sql" or "migration" in relative.lower():
        name = pure.name if suffix else f"{pure.name}.sql"
        return f"backend/migrations/{name}"
    if not suffix:
        relative += ".ts"
    return f"backend/src/{relative}"


def scan_dependencies(contents: Sequence[str]) -> set[str]:
    """Bare package names imported or required by the given sources."""
    packages: set[str] = set()
    for content in contents:
        for specifier in _RE_MODULE_SPECIFIER.findall(content):
            if specifier.startswith((".", "/", "node:")):
                continue
            segments = specifier.split("/")
            name = "/".join(segments[:2]) if specifier.startswith("@") else segments[0]
            if name in _NODE_BUILTINS or not _RE_PACKAGE_NAME.match(name):
                continue
            packages.add(name)
    return packages


def _identifier(name: str, taken: set[str], fallback: str) -> str:
    ident = re.sub(r"\W", "", name) or fallback
    if ident[0].isdigit():
        ident = f"{fallback}{ident}"
    candidate, n = ident, 2
    while candidate in taken:
        candidate = f"{ident}{n}"
        n += 1
    taken.add(candidate)
    return candidate


def _module_path(path: str, base: str) -> str:
    """``frontend/src/components/X.tsx`` -> ``./components/X`` relative to *base*."""
    relative = path[len(base):]
    return "./" + relative.rsplit(".", 1)[0]


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------

class ProjectAssembler:
    """Turns generated files into the final project tree.

    Args:
        ports: Client and server ports baked into configs and scripts.
        renderer: Template renderer for synthesized text files.
        strict: Raise ``AssemblyCollision`` on the first conflicting
            collision instead of renaming the later file.
    """

    def __init__(
        self,
        ports: PortConfig | None = None,
        renderer: TemplateRenderer | None = None,
        strict: bool = False,
    ) -> None:
        self.ports = ports or PortConfig()
        self.renderer = renderer or TemplateRenderer()
        self.strict = strict

    # -- Public API ---------------------------------------------------------

    def assemble(
        self, files: Sequence[GeneratedFile], project_name: str, description: str = ""
    ) -> list[tuple[str, str]]:
        """Return the ordered ``(path, content)`` list for the project."""
        return self.assemble_with_report(files, project_name, description).as_pairs()

    def assemble_with_report(
        self, files: Sequence[GeneratedFile], project_name: str, description: str = ""
    ) -> AssembledProject:
        project_name = project_name.strip() or "Generated Project"
        placed: dict[str, ProjectFile] = {}
        collisions: list[CollisionRecord] = []

        for file in files:
            bucket = partition(file)
            self._place(placed, collisions, file, bucket, normalize_path(file.path, bucket))

        buckets = [b for b in Bucket if any(f.bucket is b for f in placed.values())]
        context = self._context(placed, project_name, description)

        synthesized: list[ProjectFile] = []
        for bucket in buckets:
            for path, content in self._synthesize_bucket(bucket, placed, context).items():
                if path in placed:
                    collisions.append(CollisionRecord(
                        path=path, kind=CollisionKind.SUPPRESSED,
                        first_source=placed[path].source, second_source=SYNTHESIZED,
                    ))
                    continue
                synthesized.append(ProjectFile(path=path, content=content, bucket=bucket))

        root: list[ProjectFile] = []
        if len(buckets) == len(Bucket):
            root = [
                ProjectFile(path=path, content=content)
                for path, content in self._synthesize_root(context).items()
            ]

        everything = list(placed.values()) + synthesized
        ordered = sorted(root, key=lambda f: f.path)
        for bucket in Bucket:
            ordered.extend(sorted((f for f in everything if f.bucket is bucket), key=lambda f: f.path))

        return AssembledProject(
            project_name=project_name, files=ordered, buckets=buckets, collisions=collisions
        )

    # -- Placement ----------------------------------------------------------

    def _place(
        self,
        placed: dict[str, ProjectFile],
        collisions: list[CollisionRecord],
        file: GeneratedFile,
        bucket: Bucket,
        path: str,
    ) -> None:
        existing = placed.get(path)
        if existing is None:
            placed[path] = ProjectFile(path=path, content=file.content, bucket=bucket, source=file.path)
            return

        if existing.content == file.content:
            collisions.append(CollisionRecord(
                path=path, kind=CollisionKind.DUPLICATE,
                first_source=existing.source, second_source=file.path,
            ))
            return

        if self.strict:
            raise AssemblyCollision(path, existing.source, file.path)

        pure = PurePosixPath(path)
        n = 2
        renamed = str(pure.with_name(f"{pure.stem}-{n}{pure.suffix}"))
        while renamed in placed:
            n += 1
            renamed = str(pure.with_name(f"{pure.stem}-{n}{pure.suffix}"))
        placed[renamed] = ProjectFile(path=renamed, content=file.content, bucket=bucket, source=file.path)
        collisions.append(CollisionRecord(
            path=path, kind=CollisionKind.RENAMED,
            first_source=existing.source, second_source=file.path, renamed_to=renamed,
        ))

    # -- Template context ---------------------------------------------------

    def _context(
        self, placed: dict[str, ProjectFile], project_name: str, description: str
    ) -> dict[str, Any]:
        client = sorted(p for p, f in placed.items() if f.bucket is Bucket.CLIENT)
        server = sorted(p for p, f in placed.items() if f.bucket is Bucket.SERVER)

        names: set[str] = set()
        barrel_names: set[str] = set()
        components = []
        barrel = []
        for path in client:
            pure = PurePosixPath(path)
            if not (path.startswith("frontend/src/components/") and pure.suffix in (".tsx", ".jsx")):
                continue
            is_default = _RE_DEFAULT_EXPORT.search(placed[path].content) is not None
            barrel.append({
                "name": _identifier(pascal_case(pure.stem), barrel_names, "Component"),
                "import_path": _module_path(path, "frontend/src/components/"),
                "default": is_default,
            })
            if is_default:
                name = _identifier(pascal_case(pure.stem), names, "Component")
                components.append({
                    "name": name,
                    "import_path": _module_path(path, "frontend/src/"),
                    "label": re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", name),
                })

        client_scripts = [placed[p].content for p in client if p.endswith(_SCRIPT_SUFFIXES)]
        stylesheets = [
            _module_path(path, "frontend/src/") + ".css"
            for path in client
            if path.endswith(".css")
            and not any(PurePosixPath(path).name in script for script in client_scripts)
        ]

        routes = []
        route_names: set[str] = set()
        for path in server:
            pure = PurePosixPath(path)
            if (
                path.startswith("backend/src/routes/")
                and pure.suffix in (".ts", ".js")
                and _RE_DEFAULT_EXPORT.search(placed[path].content)
            ):
                stem = pascal_case(pure.stem) or "Routes"
                name = _identifier(stem[0].lower() + stem[1:], route_names, "routes")
                routes.append({"name": name, "import_path": _module_path(path, "backend/src/")})

        context: dict[str, Any] = {
            "project_name": project_name,
            "description": description.strip() or project_name,
            "slug": sanitize_name(project_name) or "generated-project",
            "ports": self.ports.as_dict(),
            "frontend_url": self.ports.frontend_url,
            "backend_url": self.ports.backend_url,
            "components": components,
            "barrel": barrel,
            "stylesheets": stylesheets,
            "routes": routes,
            "migrations": [p[len("backend/"):] for p in server if p.startswith("backend/migrations/")],
            "client_entry": next((p for p in _CLIENT_ENTRIES if p in placed), None),
            "server_entry": next((p for p in _SERVER_ENTRIES if p in placed), None),
        }
        for key, (path, export) in _MIDDLEWARE_EXPORTS.items():
            pattern = rf"\bexport\s+(?:async\s+)?(?:function|const)\s+{export}\b"
            context[key] = path in placed and re.search(pattern, placed[path].content) is not None
        return context

    # -- Synthesis ----------------------------------------------------------

    def _dependencies(
        self, bucket: Bucket, placed: dict[str, ProjectFile]
    ) -> tuple[dict[str, str], dict[str, str]]:
        base, base_dev = _BASE_DEPENDENCIES[bucket]
        scripts = [
            f.content for f in placed.values()
            if f.bucket is bucket and f.path.endswith(_SCRIPT_SUFFIXES)
        ]
        runtime = set(base)
        dev = set(base_dev)
        for name in scan_dependencies(scripts):
            if name.startswith("@types/") or name in dev:
                dev.add(name)
            else:
                runtime.add(name)
        for name in list(runtime):
            if name in TYPE_PACKAGES:
                dev.add(TYPE_PACKAGES[name])
        pin = PINNED_VERSIONS.get
        return (
            {name: pin(name, "latest") for name in sorted(runtime)},
            {name: pin(name, "latest") for name in sorted(dev)},
        )

    def _synthesize_bucket(
        self, bucket: Bucket, placed: dict[str, ProjectFile], context: dict[str, Any]
    ) -> dict[str, str]:
        if bucket is Bucket.CLIENT:
            return self._synthesize_client(placed, context)
        return self._synthesize_server(placed, context)

    def _synthesize_client(
        self, placed: dict[str, ProjectFile], context: dict[str, Any]
    ) -> dict[str, str]:
        dependencies, dev_dependencies = self._dependencies(Bucket.CLIENT, placed)
        entry = context["client_entry"] or "frontend/src/main.tsx"
        ctx = {**context, "entry": entry[len("frontend/src/"):]}
        package = {
            "name": f"{context['slug']}-frontend",
            "private": True,
            "version": "1.0.0",
            "type": "module",
            "scripts": {"dev": "vite", "build": "tsc && vite build", "preview": "vite preview"},
            "dependencies": dependencies,
            "devDependencies": dev_dependencies,
        }
        tsconfig = {
            "compilerOptions": {
                "target": "ES2020",
                "useDefineForClassFields": True,
                "lib": ["ES2020", "DOM", "DOM.Iterable"],
                "module": "ESNext",
                "skipLibCheck": True,
                "moduleResolution": "bundler",
                "allowImportingTsExtensions": True,
                "resolveJsonModule": True,
                "isolatedModules": True,
                "noEmit": True,
                "jsx": "react-jsx",
                "strict": True,
                "noUnusedLocals": False,
                "noUnusedParameters": False,
                "noFallthroughCasesInSwitch": True,
            },
            "include": ["src"],
            "references": [{"path": "./tsconfig.node.json"}],
        }
        tsconfig_node = {
            "compilerOptions": {
                "composite": True,
                "skipLibCheck": True,
                "module": "ESNext",
                "moduleResolution": "bundler",
                "allowSyntheticDefaultImports": True,
            },
            "include": ["vite.config.ts"],
        }

        files = {
            "frontend/package.json": _json(package),
            "frontend/tsconfig.json": _json(tsconfig),
            "frontend/tsconfig.node.json": _json(tsconfig_node),
            "frontend/vite.config.ts": self.renderer.render("frontend/vite.config.ts.j2", ctx),
            "frontend/index.html": self.renderer.render("frontend/index.html.j2", ctx),
            "frontend/src/App.tsx": self.renderer.render("frontend/App.tsx.j2", ctx),
            "frontend/README.md": self.renderer.render("frontend/README.md.j2", ctx),
            "frontend/.gitignore": self.renderer.render("shared/gitignore.j2", ctx),
        }
        if context["client_entry"] is None or context["client_entry"] == "frontend/src/main.tsx":
            files["frontend/src/main.tsx"] = self.renderer.render("frontend/main.tsx.j2", ctx)
        if len(context["barrel"]) >= 2:
            files["frontend/src/components/index.ts"] = self.renderer.render(
                "frontend/components_index.ts.j2", ctx
            )
        return files

    def _synthesize_server(
        self, placed: dict[str, ProjectFile], context: dict[str, Any]
    ) -> dict[str, str]:
        dependencies, dev_dependencies = self._dependencies(Bucket.SERVER, placed)
        entry = (context["server_entry"] or "backend/src/server.ts")[len("backend/"):]
        compiled = "dist/" + entry[len("src/"):].rsplit(".", 1)[0] + ".js"
        ctx = {
            **context,
            "uses_jwt": "jsonwebtoken" in dependencies,
            "uses_database": "pg" in dependencies or bool(context["migrations"]),
        }
        package = {
            "name": f"{context['slug']}-backend",
            "version": "1.0.0",
            "private": True,
            "description": f"{context['project_name']} API server",
            "main": compiled,
            "scripts": {
                "dev": f"ts-node-dev --respawn --transpile-only {entry}",
                "build": "tsc",
                "start": f"node {compiled}",
            },
            "dependencies": dependencies,
            "devDependencies": dev_dependencies,
        }
        tsconfig = {
            "compilerOptions": {
                "target": "ES2020",
                "module": "commonjs",
                "lib": ["ES2020"],
                "outDir": "dist",
                "rootDir": "src",
                "strict": True,
                "esModuleInterop": True,
                "skipLibCheck": True,
                "forceConsistentCasingInFileNames": True,
                "resolveJsonModule": True,
            },
            "include": ["src"],
        }

        files = {
            "backend/package.json": _json(package),
            "backend/tsconfig.json": _json(tsconfig),
            "backend/.env.example": self.renderer.render("backend/env.example.j2", ctx),
            "backend/README.md": self.renderer.render("backend/README.md.j2", ctx),
            "backend/.gitignore": self.renderer.render("shared/gitignore.j2", ctx),
        }
        if context["server_entry"] is None or context["server_entry"] == "backend/src/server.ts":
            files["backend/src/server.ts"] = self.renderer.render("backend/server.ts.j2", ctx)
        return files

    def _synthesize_root(self, context: dict[str, Any]) -> dict[str, str]:
        package = {
            "name": context["slug"],
            "version": "1.0.0",
            "private": True,
            "description": context["description"],
            "scripts": {
                "install:frontend": "npm install --prefix frontend",
                "install:backend": "npm install --prefix backend",
                "install:all": "npm run install:backend && npm run install:frontend",
                "dev:frontend": "npm run dev --prefix frontend",
                "dev:backend": "npm run dev --prefix backend",
                "build:frontend": "npm run build --prefix frontend",
                "build:backend": "npm run build --prefix backend",
                "build": "npm run build:backend && npm run build:frontend",
            },
        }
        return {
            "README.md": self.renderer.render("root/README.md.j2", context),
            "package.json": _json(package),
            "START.sh": self.renderer.render("root/START.sh.j2", context),
            "START.bat": self.renderer.render("root/START.bat.j2", context).replace("\n", "\r\n"),
        }


def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"
