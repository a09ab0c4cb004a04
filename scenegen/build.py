#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from scenegen.class_catalog import ClassCatalog
from scenegen.code_model import build_code_model, build_input_actions
from scenegen.config import SceneGenConfig, build_config
from scenegen.errors import (
    FatalGenerationError,
    SceneDescriptionError,
    SceneGenError,
)
from scenegen.exporter import export_models
from scenegen.files import find_files, project_relative_paths, reset_output_folder
from scenegen.model import CodeModel, InputActionName, SourceFile
from scenegen.project_settings import read_property_names
from scenegen.provider import SceneLoader
from scenegen.renderer import SwiftRenderer
from scenegen.scene import describe_scene
from scenegen.text_resource import TextSceneLoader

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    generated: List[Path] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    shared_file: Optional[Path] = None
    input_actions_file: Optional[Path] = None
    models_file: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return not self.failed


def load_catalog(config: SceneGenConfig) -> ClassCatalog:
    if config.extension_api is not None:
        catalog = ClassCatalog.from_extension_api(config.extension_api)
    else:
        catalog = ClassCatalog()
    if config.native_classes:
        catalog = catalog.extended(config.native_classes)
    return catalog


def render_scene_file(
    path: str,
    loader: SceneLoader,
    catalog: ClassCatalog,
    renderer: SwiftRenderer,
) -> Tuple[CodeModel, SourceFile]:
    """Run one scene through the pipeline: load, describe, model, render."""
    description = describe_scene(loader.load_scene(path), catalog)
    model = build_code_model(description)
    return model, renderer.render_scene(model)


def _prepare_output(config: SceneGenConfig) -> None:
    output = config.output_path
    if not config.clean_output:
        output.mkdir(parents=True, exist_ok=True)
        return
    if output == config.project_path or output in config.project_path.parents:
        raise FatalGenerationError(
            f"Refusing to clear output folder {output}: it contains the project."
        )
    logger.info("Resetting output folder %s", output)
    try:
        reset_output_folder(output)
    except OSError as exc:
        raise FatalGenerationError(f"Error resetting output folder at {output}: {exc}") from exc


def generate(
    config: SceneGenConfig,
    *,
    loader: Optional[SceneLoader] = None,
    catalog: Optional[ClassCatalog] = None,
    renderer: Optional[SwiftRenderer] = None,
) -> GenerationReport:
    """Generate bindings for every scene of a project plus the shared files.

    A scene that fails is recorded in the report and the run carries on.
    Failing to produce the shared or input-action files raises
    :class:`FatalGenerationError`, since every scene file depends on them.
    """
    _prepare_output(config)
    loader = loader or TextSceneLoader(config.project_path)
    catalog = catalog or load_catalog(config)
    renderer = renderer or SwiftRenderer()
    report = GenerationReport()
    models: List[CodeModel] = []
    written_names: dict[str, str] = {}

    scene_paths = project_relative_paths(
        config.project_path,
        find_files(
            config.project_path,
            config.scene_extensions,
            ignore_marker=config.ignore_marker,
        ),
    )
    for path in scene_paths:
        try:
            model, source = render_scene_file(path, loader, catalog, renderer)
            previous = written_names.get(source.file_name)
            if previous is not None:
                raise SceneGenError(
                    f"{source.file_name} was already generated from {previous}."
                )
            target = source.write_to(config.output_path)
        except SceneDescriptionError as exc:
            if exc.is_skip:
                logger.info("Skipping %s: %s", path, exc)
                report.skipped.append((path, str(exc)))
            else:
                logger.error("Error generating swift for file: %s. %s", path, exc)
                report.failed.append((path, str(exc)))
            continue
        except (SceneGenError, OSError) as exc:
            logger.error("Error generating swift for file: %s. %s", path, exc)
            report.failed.append((path, str(exc)))
            continue
        written_names[source.file_name] = path
        models.append(model)
        report.generated.append(target)
        logger.info("Generated extension for %s", path)

    try:
        report.shared_file = renderer.render_shared().write_to(config.output_path)
    except (SceneGenError, OSError) as exc:
        raise FatalGenerationError(f"Failed to generate shared code: {exc}") from exc
    logger.info("Generated shared code.")

    actions = _generate_input_actions(config, renderer, report)

    if config.dump_models:
        try:
            report.models_file = export_models(models, actions, config.output_path)
        except OSError as exc:
            raise FatalGenerationError(f"Failed to write scene models: {exc}") from exc

    logger.info("Finished generating.")
    return report


def _generate_input_actions(
    config: SceneGenConfig,
    renderer: SwiftRenderer,
    report: GenerationReport,
) -> List[InputActionName]:
    try:
        names = read_property_names(
            config.project_path,
            include_builtin_actions=config.include_builtin_actions,
        )
        actions = build_input_actions(names)
        report.input_actions_file = renderer.render_input_actions(actions).write_to(
            config.output_path
        )
    except (SceneGenError, OSError) as exc:
        raise FatalGenerationError(f"Failed to generate input actions: {exc}") from exc
    logger.info("Generated %d input actions.", len(actions))
    return actions


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="scene-gen",
        description=(
            "Generate SwiftGodot bindings (typed node accessors, animation names "
            "and input actions) from the scenes of a Godot project."
        ),
    )
    parser.add_argument(
        "project_path",
        help="Path to a folder with a project.godot file.",
    )
    parser.add_argument(
        "output_path",
        help="The location to place the generated code. It is cleared first.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Optional YAML or JSON config file. Defaults to scenegen.yaml, "
            "scenegen.yml or scenegen.json in the project folder."
        ),
    )
    parser.add_argument(
        "--extension-api",
        default=None,
        help="Path to an extension_api.json dump listing the engine's native classes.",
    )
    parser.add_argument(
        "--no-builtin-actions",
        action="store_true",
        help="Only generate input actions declared in project.godot.",
    )
    parser.add_argument(
        "--keep-output",
        action="store_true",
        help="Do not clear the output folder before generating.",
    )
    parser.add_argument(
        "--dump-models",
        action="store_true",
        help="Also write scene_models.json with the intermediate code models.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    if args.extension_api:
        overrides["extension_api"] = str(Path(args.extension_api).resolve())
    if args.no_builtin_actions:
        overrides["include_builtin_actions"] = False
    if args.keep_output:
        overrides["clean_output"] = False
    if args.dump_models:
        overrides["dump_models"] = True
    return overrides


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)

    try:
        config = build_config(
            args.project_path,
            args.output_path,
            config_path=args.config,
            overrides=_cli_overrides(args),
        )
        report = generate(config)
    except SceneGenError as exc:
        logger.error("%s", exc)
        print(f"Generation failed: {exc}", file=sys.stderr)
        return 1

    print(f"Generated SceneGen bindings: {config.output_path}")
    for path in report.generated:
        print(f"- {path.name}")
    print(f"- {report.shared_file.name if report.shared_file else '(no shared file)'}")
    if report.input_actions_file is not None:
        print(f"- {report.input_actions_file.name}")
    if report.models_file is not None:
        print(f"- {report.models_file.name}")
    for path, reason in report.skipped:
        print(f"Skipped {path}: {reason.splitlines()[0]}")
    for path, reason in report.failed:
        print(f"Failed to generate code for file: {path}. {reason.splitlines()[0]}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
