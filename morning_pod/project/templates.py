"""Default command templates for different project types.

Commands may contain placeholders (``{pm}``, ``{lockfile}``, ``{srcDir}``,
...) that are substituted by the config loader.
"""

from morning_pod.project.types import (
    PackageManager,
    ProjectDetection,
    ProjectFeatures,
    ProjectTemplate,
    ProjectType,
    ScriptCategory,
    ScriptCommand,
)

CLEAN_INSTALL = "rm -rf node_modules {lockfile} && {pm} install"


def _cmd(name: str, command: str, description: str) -> ScriptCommand:
    return ScriptCommand(name=name, command=command, description=description)


def _dev(commands: list[ScriptCommand]) -> ScriptCategory:
    return ScriptCategory(name="dev", description="Development Commands", icon="🚀", commands=commands)


def _test(commands: list[ScriptCommand]) -> ScriptCategory:
    return ScriptCategory(name="test", description="Testing Commands", icon="🧪", commands=commands)


def _quality(commands: list[ScriptCommand]) -> ScriptCategory:
    return ScriptCategory(name="quality", description="Code Quality", icon="✨", commands=commands)


def _db(commands: list[ScriptCommand]) -> ScriptCategory:
    return ScriptCategory(name="db", description="Database Commands", icon="🗄️", commands=commands)


def get_nextjs_template(detection: ProjectDetection) -> ProjectTemplate:
    """Next.js application with TypeScript, Tailwind and testing."""
    categories = [
        _dev([
            _cmd("start", "{pm} run next dev --turbo", "Start development server with Turbopack"),
            _cmd("build", "{pm} run next build", "Build for production"),
            _cmd("preview", "{pm} run next start", "Start production server"),
            _cmd("clean", CLEAN_INSTALL, "Clean install dependencies"),
        ]),
        _test([
            _cmd("unit", "{pm} vitest", "Run unit tests with Vitest"),
            _cmd("e2e", "playwright test", "Run E2E tests with Playwright"),
            _cmd("all", "{pm} vitest && playwright test", "Run all tests"),
        ]),
        _quality([
            _cmd("lint", "{pm} run next lint", "Run ESLint"),
            _cmd("format", "prettier --write .", "Format code with Prettier"),
            _cmd("type-check", "tsc --noEmit", "Run TypeScript type checking"),
        ]),
    ]

    if detection.features.has_database:
        categories.append(_db([
            _cmd("generate", "{pm} run drizzle-kit generate", "Generate database migrations"),
            _cmd("migrate", "{pm} run drizzle-kit push", "Apply database migrations"),
            _cmd("studio", "{pm} run drizzle-kit studio", "Open database studio"),
        ]))

    return ProjectTemplate(
        name="nextjs",
        template_type=ProjectType.NEXTJS,
        description="Next.js application with TypeScript, Tailwind, and testing",
        package_manager=detection.package_manager,
        categories=categories,
    )


def get_react_template(detection: ProjectDetection) -> ProjectTemplate:
    """React application with common tooling."""
    test_commands = [
        _cmd("unit", "{pm} test", "Run unit tests"),
        _cmd("coverage", "{pm} test --coverage", "Run tests with coverage"),
    ]
    if detection.features.has_testing:
        test_commands.append(_cmd("e2e", "playwright test", "Run E2E tests"))

    quality_commands = []
    if detection.features.has_linting:
        quality_commands.append(_cmd("lint", "{pm} run lint", "Run ESLint"))
    quality_commands.append(_cmd("format", "prettier --write {srcDir}", "Format code with Prettier"))
    if detection.has_typescript:
        quality_commands.append(_cmd("type-check", "tsc --noEmit", "Run TypeScript type checking"))

    return ProjectTemplate(
        name="react",
        template_type=ProjectType.REACT,
        description="React application with common tooling",
        package_manager=detection.package_manager,
        categories=[
            _dev([
                _cmd("start", "{pm} start", "Start development server"),
                _cmd("build", "{pm} run build", "Build for production"),
                _cmd("preview", "{pm} run preview", "Preview production build"),
                _cmd("clean", CLEAN_INSTALL, "Clean install dependencies"),
            ]),
            _test(test_commands),
            _quality(quality_commands),
        ],
    )


def get_node_template(detection: ProjectDetection) -> ProjectTemplate:
    """Node.js API or backend service."""
    categories = [
        _dev([
            _cmd("start", "{pm} start", "Start the application"),
            _cmd("dev", "{pm} run dev", "Start in development mode"),
            _cmd("build", "{pm} run build", "Build the application"),
            _cmd("clean", CLEAN_INSTALL, "Clean install dependencies"),
        ]),
    ]

    if detection.features.has_database:
        categories.append(_db([
            _cmd("migrate", "{pm} run migrate", "Run database migrations"),
            _cmd("seed", "{pm} run seed", "Seed database with test data"),
        ]))

    test_commands = [_cmd("test", "{pm} test", "Run tests")]
    if detection.features.has_testing:
        test_commands.append(_cmd("coverage", "{pm} test --coverage", "Run tests with coverage"))
    categories.append(_test(test_commands))

    return ProjectTemplate(
        name="nodejs",
        template_type=ProjectType.NODE,
        description="Node.js API or backend service",
        package_manager=detection.package_manager,
        categories=categories,
    )


def get_generic_template(detection: ProjectDetection) -> ProjectTemplate:
    """Generic JavaScript/TypeScript project without a detected framework."""
    categories = [
        _dev([
            _cmd("start", "{pm} start", "Start the application"),
            _cmd("build", "{pm} run build", "Build the application"),
            _cmd("clean", CLEAN_INSTALL, "Clean install dependencies"),
        ]),
        _test([_cmd("test", "{pm} test", "Run tests")]),
    ]

    if detection.features.has_linting:
        quality_commands = [
            _cmd("lint", "{pm} run lint", "Run ESLint"),
            _cmd("format", "prettier --write .", "Format code with Prettier"),
        ]
        if detection.has_typescript:
            quality_commands.append(_cmd("type-check", "tsc --noEmit", "Run TypeScript type checking"))
        categories.append(_quality(quality_commands))

    return ProjectTemplate(
        name="generic",
        template_type=ProjectType.GENERIC,
        description="Generic JavaScript/TypeScript project",
        package_manager=detection.package_manager,
        categories=categories,
    )


TEMPLATE_BUILDERS = {
    ProjectType.NEXTJS: get_nextjs_template,
    ProjectType.REACT: get_react_template,
    ProjectType.NODE: get_node_template,
    ProjectType.GENERIC: get_generic_template,
}


def get_template_for_project(detection: ProjectDetection) -> ProjectTemplate:
    """Select the template for a detected project; unknown types get the generic one."""
    builder = TEMPLATE_BUILDERS.get(detection.project_type, get_generic_template)
    return builder(detection)


DEFAULT_TEMPLATES: list[ProjectTemplate] = [
    get_nextjs_template(ProjectDetection(
        project_type=ProjectType.NEXTJS,
        package_manager=PackageManager.BUN,
        has_typescript=True,
        features=ProjectFeatures(has_linting=True, has_testing=True, has_tailwind=True),
    )),
    get_react_template(ProjectDetection(
        project_type=ProjectType.REACT,
        package_manager=PackageManager.NPM,
        features=ProjectFeatures(has_linting=True, has_testing=True),
    )),
    get_node_template(ProjectDetection(
        project_type=ProjectType.NODE,
        package_manager=PackageManager.NPM,
        features=ProjectFeatures(has_database=True, has_linting=True, has_testing=True),
    )),
    get_generic_template(ProjectDetection(
        project_type=ProjectType.GENERIC,
        package_manager=PackageManager.NPM,
    )),
]
