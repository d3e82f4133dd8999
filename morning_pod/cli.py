"""Command-line interface for morning-pod."""

import argparse
import json
import logging
import sys
from pathlib import Path

from morning_pod.ai.credentials import is_provider_configured
from morning_pod.ai.models import AI_PROVIDERS, AIModel, ModelType, get_model
from morning_pod.ai.optimizer import CostOptimizer
from morning_pod.ai.pricing import calculate_summarization_cost, calculate_tts_cost
from morning_pod.ai.recommender import ModelRecommender, Priority
from morning_pod.config import CONFIG_PATHS, Config
from morning_pod.project.detector import ProjectDetector
from morning_pod.project.templates import get_template_for_project

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _model_to_dict(model: AIModel) -> dict:
    return {
        "id": model.model_id,
        "name": model.name,
        "provider": model.provider,
        "type": model.model_type.value,
        "quality": model.quality.value,
        "speed": model.speed.value,
        "features": list(model.features),
        "cost_per_1k_tokens": model.cost_per_1k_tokens,
        "cost_per_character": model.cost_per_character,
        "context_window": model.context_window,
    }


def _format_price(model: AIModel) -> str:
    if model.cost_per_1k_tokens is not None:
        return f"${model.cost_per_1k_tokens * 1000:.3f} / 1M tokens"
    if model.cost_per_character is not None:
        return f"${model.cost_per_character * 1_000_000:.2f} / 1M chars"
    return "n/a"


def cmd_models(args: argparse.Namespace) -> int:
    """Handle the models command - list the provider catalog."""
    providers = [p for p in AI_PROVIDERS if not args.provider or p.provider_id == args.provider]
    if not providers:
        logger.error(f"Unknown provider: {args.provider}")
        return 1

    model_type = ModelType(args.type) if args.type else None

    if args.json:
        data = [
            _model_to_dict(model)
            for provider in providers
            for model in provider.models
            if model_type is None or model.model_type == model_type
        ]
        print(json.dumps(data, indent=2))
        return 0

    print("Available AI Models")
    print("=" * 60)
    for provider in providers:
        models = [m for m in provider.models if model_type is None or m.model_type == model_type]
        if not models:
            continue
        print(f"\n[{provider.name.upper()}]")
        for model in models:
            print(f"  {model.model_id:<20} {model.model_type.value:<14} "
                  f"{model.quality.value:<9} {model.speed.value:<7} {_format_price(model)}")

    return 0


def cmd_recommend(args: argparse.Namespace) -> int:
    """Handle the recommend command."""
    config = Config.load()
    priority = Priority(args.priority) if args.priority else config.priority
    max_cost = args.max_cost if args.max_cost is not None else config.recommendation.max_cost

    recommender = ModelRecommender(
        priority=priority,
        max_cost=max_cost,
        limit=config.recommendation.limit,
    )
    results = recommender.recommend(ModelType(args.type), content_length=args.content_length)

    if args.json:
        data = [
            {
                "model": rec.model.model_id,
                "provider": rec.model.provider,
                "score": rec.score,
                "estimated_cost": rec.estimated_cost,
                "reasons": rec.reasons,
            }
            for rec in results
        ]
        print(json.dumps(data, indent=2))
        return 0

    print(f"Top {args.type} models (priority: {priority.value})")
    for rank, rec in enumerate(results, start=1):
        marker = " ★" if rank == 1 else ""
        print(f"  {rank}. {rec.model.name} [{rec.model.provider}]{marker}")
        print(f"     Score: {rec.score}  Estimated cost: ${rec.estimated_cost:.4f}")
        print(f"     {', '.join(rec.reasons)}")
    return 0


def cmd_cost(args: argparse.Namespace) -> int:
    """Handle the cost command."""
    model = get_model(args.model)
    if model is None:
        logger.error(f"Unknown model: {args.model}")
        return 1

    if model.model_type == ModelType.TTS:
        cost = calculate_tts_cost(model.model_id, args.characters)
        print(f"{model.name}: {args.characters} characters -> ${cost:.6f}")
    else:
        cost = calculate_summarization_cost(model.model_id, args.input_tokens, args.output_tokens)
        print(f"{model.name}: {args.input_tokens} in + {args.output_tokens} out tokens -> ${cost:.6f}")
    return 0


def cmd_providers(args: argparse.Namespace) -> int:
    """Handle the providers command - show which providers have API keys."""
    for provider in AI_PROVIDERS:
        configured = is_provider_configured(provider.provider_id)
        status = "✓ configured" if configured else "✗ missing API key"
        limit = ""
        if provider.rate_limit:
            limit = f" ({provider.rate_limit.requests_per_minute} req/min)"
        print(f"{provider.name:<14} {provider.provider_type.value:<14} {status}{limit}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the analyze command - run the cost optimizer over an article."""
    if args.file:
        try:
            content = Path(args.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read {args.file}: {e}")
            return 1
    else:
        content = sys.stdin.read()

    if not content.strip():
        logger.error("No content to analyze")
        return 1

    config = Config.load()
    optimizer = CostOptimizer(
        budget=config.budget.to_budget(),
        cache_ttl_hours=config.budget.cache_ttl_hours,
    )
    result = optimizer.optimize(content, required_quality=args.quality)

    data = {
        "should_process": result.should_process,
        "recommended_model": result.recommended_model,
        "estimated_cost": result.estimated_cost,
        "reason": result.reason,
        "quality_trade": result.quality_trade,
    }
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            print(f"{key.replace('_', ' ').capitalize() + ':':<20} {value}")
    return 0


def cmd_detect(args: argparse.Namespace) -> int:
    """Handle the detect command - show detected project and its template."""
    cwd = Path(args.path) if args.path else Path.cwd()
    detector = ProjectDetector(cwd)
    detection = detector.detect()
    template = get_template_for_project(detection)

    if args.json:
        data = {
            "name": detector.project_name(),
            "type": detection.project_type,
            "framework": detection.framework,
            "package_manager": detection.package_manager,
            "typescript": detection.has_typescript,
            "features": vars(detection.features),
            "template": template.name,
            "categories": [c.to_dict() for c in template.categories],
        }
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    print(f"Project:          {detector.project_name()}")
    print(f"Type:             {detection.framework or detection.project_type}")
    print(f"Package Manager:  {detection.package_manager}")
    print(f"TypeScript:       {'Yes' if detection.has_typescript else 'No'}")
    enabled = [name.removeprefix("has_") for name, on in vars(detection.features).items() if on]
    print(f"Features:         {', '.join(enabled) or 'none'}")
    print(f"\nTemplate: {template.name} ({template.description})")
    for category in template.categories:
        print(f"  {category.icon} {category.name}: {', '.join(c.name for c in category.commands)}")
    return 0


def cmd_scripts(args: argparse.Namespace) -> int:
    """Handle the scripts command - forward to the script runner."""
    from morning_pod.project.runner import ScriptRunner

    config = Config.load()
    runner = ScriptRunner(cwd=config.scripts_dir or Path.cwd())
    try:
        return runner.run(args.extra_args)
    except KeyboardInterrupt:
        return 130


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the config command."""
    config = Config.load()

    if args.validate:
        issues = config.validate()
        if issues:
            print("Configuration issues:")
            for issue in issues:
                print(f"  - {issue}")
            return 1
        print("Configuration is valid")
        return 0

    if args.show:
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    if args.init:
        config_path = CONFIG_PATHS[0]
        if config_path.exists() and not args.force:
            print(f"Config already exists at {config_path}")
            print("Use --force to overwrite")
            return 1
        config.save(config_path)
        print(f"Config initialized at {config_path}")
        return 0

    for path in CONFIG_PATHS:
        if path.exists():
            print(f"Config loaded from: {path}")
            return 0

    print("No config file found, using defaults")
    print(f"Create one at: {CONFIG_PATHS[0]}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="morning-pod",
        description="Model selection, cost tools and project scripts for Morning Pod",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")
    type_choices = [t.value for t in ModelType]

    # models command
    models_parser = subparsers.add_parser(
        "models",
        help="List available AI models",
    )
    models_parser.add_argument("--type", choices=type_choices, help="Filter by model type")
    models_parser.add_argument("--provider", help="Filter by provider id")
    models_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # recommend command
    recommend_parser = subparsers.add_parser(
        "recommend",
        help="Recommend models for a priority",
    )
    recommend_parser.add_argument("type", choices=type_choices, help="Model type")
    recommend_parser.add_argument(
        "--priority",
        choices=[p.value for p in Priority],
        help="What to optimize for (default: from config)",
    )
    recommend_parser.add_argument(
        "--content-length",
        type=int,
        help="Tokens (summarization) or characters (tts) to price",
    )
    recommend_parser.add_argument("--max-cost", type=float, help="Cost ceiling in USD")
    recommend_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # cost command
    cost_parser = subparsers.add_parser(
        "cost",
        help="Calculate the cost of a model call",
    )
    cost_parser.add_argument("model", help="Model id")
    cost_parser.add_argument("--input-tokens", type=int, default=0)
    cost_parser.add_argument("--output-tokens", type=int, default=0)
    cost_parser.add_argument("--characters", type=int, default=0)

    # providers command
    subparsers.add_parser(
        "providers",
        help="Show provider API key status",
    )

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Pick a summarization model for an article (reads stdin without --file)",
    )
    analyze_parser.add_argument("--file", help="Article text file")
    analyze_parser.add_argument(
        "--quality",
        choices=["basic", "standard", "premium"],
        help="Required quality",
    )
    analyze_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # detect command
    detect_parser = subparsers.add_parser(
        "detect",
        help="Detect project type and show its command template",
    )
    detect_parser.add_argument("path", nargs="?", help="Project directory (default: cwd)")
    detect_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # scripts command
    subparsers.add_parser(
        "scripts",
        help="Run project scripts (arguments are passed to the script runner)",
        add_help=False,
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
    )
    config_parser.add_argument("--validate", action="store_true", help="Validate the configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current configuration")
    config_parser.add_argument("--init", action="store_true", help="Initialize default configuration file")
    config_parser.add_argument("--force", action="store_true", help="Force overwrite existing config")

    # Parse known args so script runner arguments pass through
    args, extra = parser.parse_known_args(argv)
    args.extra_args = extra

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "models": cmd_models,
        "recommend": cmd_recommend,
        "cost": cmd_cost,
        "providers": cmd_providers,
        "analyze": cmd_analyze,
        "detect": cmd_detect,
        "scripts": cmd_scripts,
        "config": cmd_config,
    }

    cmd_func = commands.get(args.command)
    if cmd_func is None:
        parser.print_help()
        return 1

    if args.command != "scripts" and extra:
        parser.error(f"unrecognized arguments: {' '.join(extra)}")

    return cmd_func(args)


if __name__ == "__main__":
    sys.exit(main())
