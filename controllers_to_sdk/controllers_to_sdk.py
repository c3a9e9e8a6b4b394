import time

import click

from .cli_utils import reconstruct_command_line
from .log import configure_logging
from .pipeline import Flavor, InternalConsistencyError, PipelineGenerator, SdkGeneratorConfig, SdkGeneratorError


@click.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--plain", "plain", is_flag=True, default=False, help="Generate the plain flavor (async request functions)")
@click.option("--rtk", "rtk", is_flag=True, default=False, help="Generate the RTK Query flavor (endpoint builders)")
@click.option("--analyze-only", is_flag=True, default=False, help="Only analyze the API (combine with --json-output)")
@click.option("--json-output", default=None, type=click.Path(resolve_path=True), help="Write the analyzed model as JSON")
@click.option("--no-prettify", is_flag=True, default=False, help="Do not format the output with prettier")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show analysis details")
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output")
def controllers_to_sdk(config_path, plain, rtk, analyze_only, json_output, no_prettify, verbose, no_color):
    """Generate a TypeScript SDK from the controllers of the API configured in CONFIG_PATH."""
    started = time.monotonic()

    try:
        config = SdkGeneratorConfig.from_file(config_path)
    except SdkGeneratorError as e:
        configure_logging(verbose, no_color)
        _fail(e, no_color)

    # Command line flags override the config file
    verbose = verbose or config.verbose
    no_color = no_color or config.no_color
    configure_logging(verbose, no_color)

    flavors = [flavor for flavor, selected in ((Flavor.PLAIN, plain), (Flavor.RTK, rtk)) if selected]
    if flavors:
        config.flavors = flavors
    if json_output:
        config.json_output = json_output
    if no_prettify:
        config.formatter.enabled = False

    generator = PipelineGenerator(config, command_line=reconstruct_command_line(controllers_to_sdk))

    try:
        if analyze_only:
            sdk_content = generator.analyze()
            if config.json_output:
                generator.write_json_output(sdk_content)
        else:
            generator.run()
    except SdkGeneratorError as e:
        _fail(e, no_color)

    click.echo(click.style(f"@ Done in {time.monotonic() - started:.2f}s", fg=None if no_color else "green"), color=not no_color)


def _fail(error: SdkGeneratorError, no_color: bool) -> None:
    label = "Internal error" if isinstance(error, InternalConsistencyError) else "ERROR"
    message = f"{label}: {error}"
    click.echo(message if no_color else click.style(message, fg="bright_red"), err=True, color=not no_color)
    raise SystemExit(1)


if __name__ == "__main__":
    controllers_to_sdk()
