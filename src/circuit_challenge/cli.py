"""
Command line tool to generate Circuit Challenge puzzles.

Usage:
    circuit-challenge --level 3 --count 5
    circuit-challenge --config my_difficulty.yaml --seed 42 --visualize
    circuit-challenge --level 5 --rows 5 --cols 6 --create-sheet
"""

import click
import json
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import matplotlib.pyplot as plt
import yaml

from . import config
from .core.difficulty import (
    DIFFICULTY_PRESETS, get_difficulty_by_level, load_difficulty_file,
    validate_difficulty_settings,
)
from .core.utils import PuzzleConverter
from .core.validator import PuzzleValidator
from .generators.puzzle_generator import PuzzleGenerator, GenerationOptions
from .visualization.static_viz import PuzzleVisualizer

PUZZLES_PER_SHEET = 6


def _resolve_difficulty(level, config_file, rows, cols):
    if config_file:
        try:
            difficulty = load_difficulty_file(config_file)
        except (ValueError, TypeError, yaml.YAMLError) as e:
            click.echo(f"Error loading difficulty file '{config_file}': {e}")
            sys.exit(1)
    else:
        difficulty = get_difficulty_by_level(level)

    if rows or cols:
        # Zero path lengths are re-derived from the new grid size
        difficulty = replace(
            difficulty,
            grid_rows=rows or difficulty.grid_rows,
            grid_cols=cols or difficulty.grid_cols,
            min_path_length=0,
            max_path_length=0,
        )

    return difficulty


@click.command()
@click.option('--level', '-l', type=click.IntRange(1, len(DIFFICULTY_PRESETS)), default=3,
              help='Difficulty preset level (1-10)')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False),
              default=None, help='YAML file with difficulty settings (overrides --level)')
@click.option('--rows', type=click.IntRange(2, None), default=None,
              help='Override the number of grid rows')
@click.option('--cols', type=click.IntRange(2, None), default=None,
              help='Override the number of grid columns')
@click.option('--count', '-n', type=click.IntRange(1, None), default=1,
              help='Number of puzzles to generate')
@click.option('--seed', type=int, default=None,
              help='Random seed for reproducibility')
@click.option('--max-attempts', type=click.IntRange(1, None), default=config.DEFAULT_MAX_ATTEMPTS,
              help='Pipeline attempts per puzzle')
@click.option('--no-validate', is_flag=True,
              help='Skip the final validation pass')
@click.option('--visualize', is_flag=True,
              help='Save a PNG of every generated puzzle')
@click.option('--create-sheet', is_flag=True,
              help='Create printable puzzle sheets')
@click.option('--show-solution', is_flag=True,
              help='Highlight the solution path in visualizations')
@click.option('--output-dir', '-o', type=click.Path(file_okay=False), default=str(config.RESULTS_DIR),
              help='Output directory for images and the generation summary')
@click.option('--verbose', '-v', is_flag=True,
              help='Log every generation attempt')
def main(level, config_file, rows, cols, count, seed, max_attempts, no_validate,
         visualize, create_sheet, show_solution, output_dir, verbose):
    """Generate Circuit Challenge puzzles."""

    click.echo("=" * 60)
    click.echo("Circuit Challenge Puzzle Generator")
    click.echo("=" * 60)

    difficulty = _resolve_difficulty(level, config_file, rows, cols)

    validation = validate_difficulty_settings(difficulty)
    if not validation.valid:
        click.echo(f"Invalid difficulty settings for '{difficulty.name}':")
        for error in validation.errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    click.echo(f"\nGenerating {count} '{difficulty.name}' puzzle(s) at "
               f"{difficulty.grid_rows}x{difficulty.grid_cols}")

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    generator = PuzzleGenerator(GenerationOptions(
        max_attempts=max_attempts,
        validate_result=not no_validate,
        verbose=verbose,
        random_seed=seed,
    ))

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    puzzles = []
    failures = []
    records = []

    with click.progressbar(length=count, label='Generating puzzles') as bar:
        for i in range(count):
            result = generator.generate(difficulty)

            if result.success:
                puzzles.append(result.puzzle)
                records.append({
                    'id': result.puzzle.id,
                    'attempts': result.attempts,
                    'solution': [[c.row, c.col] for c in result.puzzle.solution.path],
                    'statistics': PuzzleValidator.get_puzzle_statistics(result.puzzle),
                })
            else:
                failures.append(result.error)

            bar.update(1)

    click.echo(f"\n\nGeneration complete!")
    click.echo(f"Successfully generated {len(puzzles)}/{count} puzzles")
    for error in failures:
        click.echo(f"  Failed: {error}")

    if puzzles and (visualize or create_sheet):
        viz_dir = output_path / config.VISUALIZATIONS_SUBDIR
        viz = PuzzleVisualizer()

        if visualize:
            click.echo("\nCreating visualizations...")
            for i, puzzle in enumerate(puzzles):
                image_path = viz_dir / f"puzzle_{timestamp}_{i:04d}.png"
                viz.visualize(puzzle, show_solution=show_solution,
                              title=f"{difficulty.name} #{i + 1}",
                              save_path=image_path, show_plot=False)
            click.echo(f"Saved {len(puzzles)} images to: {viz_dir}")

        if create_sheet:
            click.echo("\nCreating puzzle sheets...")
            sheets_created = 0
            for sheet_num, i in enumerate(range(0, len(puzzles), PUZZLES_PER_SHEET)):
                sheet_path = viz_dir / f"puzzle_sheet_{timestamp}_{sheet_num + 1}.png"
                fig = viz.create_puzzle_sheet(
                    puzzles[i:i + PUZZLES_PER_SHEET],
                    rows=2,
                    cols=3,
                    save_path=sheet_path
                )
                plt.close(fig)
                sheets_created += 1
            click.echo(f"Created {sheets_created} puzzle sheets in: {viz_dir}")

    summary = {
        'timestamp': timestamp,
        'requested': count,
        'total_generated': len(puzzles),
        'failures': failures,
        'difficulty': difficulty.to_dict(),
        'generator_config': {
            'max_attempts': max_attempts,
            'validate': not no_validate,
            'seed': seed,
        },
        'puzzles': records,
    }

    summary_path = output_path / f"generation_summary_{timestamp}.json"
    with open(summary_path, 'w', encoding='utf-8') as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)

    click.echo(f"\nGeneration summary saved to: {summary_path}")

    if puzzles:
        sample = puzzles[0]
        click.echo(f"\nSample puzzle ({sample.id}):")
        click.echo(str(sample))
        click.echo("\nAnswers and connectors:")
        click.echo(PuzzleConverter.to_string(sample))

        stats = records[0]['statistics']
        click.echo(f"\nPuzzle statistics:")
        click.echo(f"  Connectors: {stats['num_connectors']} {stats['connector_kinds']}")
        click.echo(f"  Connector values: {stats['min_connector_value']}-{stats['max_connector_value']}")
        click.echo(f"  Solution: {stats['path_length']} cells, {stats['steps']} steps "
                   f"({stats['path_coverage']:.0%} coverage)")
        click.echo(f"  Operations: {stats['operations']}")
        click.echo(f"  Decoys reaching FINISH: {stats['decoys_reaching_finish']}/{stats['num_decoys']}")

    if not puzzles:
        sys.exit(1)


if __name__ == '__main__':
    main()
