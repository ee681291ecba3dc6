#!/usr/bin/env python3
"""
Bandix Query Tool
Standalone script for reading Bandix traffic data and managing per-device limits
"""

import sys
import json
import asyncio
import click

from config.settings import settings
from src.bandix_client.client import BandixClient, create_client
from src.bandix_client.models import DeviceRecord
from src.render.chart import render_chart
from src.render.surfaces import ImageSurface
from src.telemetry.aggregator import aggregate
from src.telemetry.limits import LimitControl, LIMIT_PRESETS
from src.telemetry.scheduler import PollScheduler
from src.telemetry.service import INTERFACES, ServiceControl
from src.telemetry.sorting import SortDirection, SortField, sort_devices
from src.telemetry.store import StateStore
from src.utils.logger import get_logger
from src.utils.validators import SERVICE_ACTIONS
from src.utils.table_formatters import (
    format_clients_rich,
    format_status_rich,
    format_history_rich,
    format_stats_rich,
    format_write_result
)

logger = get_logger(__name__)

def output_result(data, ctx, format_func=None):
    """Output data to stdout or file based on context."""
    output_file = ctx.obj.get('output_file')
    output_format = ctx.obj.get('output_format', 'json')

    if output_format == 'json':
        output_data = json.dumps(data, indent=2)
    else:
        # For table format, use the provided format function or default
        if format_func:
            output_data = format_func(data)
        else:
            output_data = str(data)

    if output_file:
        try:
            with open(output_file, 'w') as f:
                f.write(output_data)
            click.echo(f"Output written to: {output_file}")
        except OSError as e:
            click.echo(f"Error writing to file {output_file}: {e}", err=True)
            sys.exit(1)
    else:
        click.echo(output_data)

def fail(message):
    """Report an error on stderr and exit with status 1."""
    logger.debug(f"Command failed: {message}")
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)

@click.group()
@click.option('--config', default=None, help='Configuration file path')
@click.option('--output', '-o', type=click.Choice(['json', 'table']), default='json', help='Output format')
@click.option('--output-file', '-f', type=click.Path(dir_okay=False, writable=True), help='Output file path (writes to file instead of stdout)')
@click.option('--url', help='Router base URL, e.g. http://192.168.1.1')
@click.option('--demo', is_flag=True, default=False, help='Use generated demo data instead of a router')
@click.pass_context
def cli(ctx, config, output, output_file, url, demo):
    """Bandix traffic monitoring tool."""
    ctx.ensure_object(dict)
    ctx.obj['output_format'] = output
    ctx.obj['output_file'] = output_file

    try:
        if config:
            settings.reload(config)

        if url and not demo:
            client = BandixClient(base_url=url)
        else:
            client = create_client(demo=demo or None)

        ctx.obj['client'] = client
        ctx.call_on_close(client.close)

    except Exception as e:
        click.echo(f"Error initializing client: {e}", err=True)
        sys.exit(1)

@cli.command()
@click.option('--sort', 'sort_field', type=click.Choice([field.value for field in SortField]),
              default=SortField.DOWNLOAD_SPEED.value, help='Sort column')
@click.option('--asc', is_flag=True, default=False, help='Sort ascending (default descending)')
@click.pass_context
def clients(ctx, sort_field, asc):
    """List monitored clients with their traffic counters."""
    try:
        devices = ctx.obj['client'].get_clients()
        direction = SortDirection.ASC if asc else SortDirection.DESC
        ordered = sort_devices(devices, SortField(sort_field), direction)

        wrapped_data = {'clients': [device.to_dict() for device in ordered]}
        output_result(wrapped_data, ctx, format_clients_rich)

    except Exception as e:
        fail(e)

@cli.command()
@click.pass_context
def status(ctx):
    """Show the bandixd service status."""
    try:
        service_status = ctx.obj['client'].get_status()
        output_result({'status': service_status.to_dict()}, ctx, format_status_rich)

    except Exception as e:
        fail(e)

@cli.command()
@click.pass_context
def history(ctx):
    """Show the router's bandwidth history series."""
    try:
        points = ctx.obj['client'].get_history()
        output_result({'history': [point.to_dict() for point in points]}, ctx, format_history_rich)

    except Exception as e:
        fail(e)

@cli.command()
@click.pass_context
def stats(ctx):
    """Show aggregate traffic totals and current rates across all clients."""
    try:
        client = ctx.obj['client']
        devices = client.get_clients()
        totals, rates = aggregate(devices)
        reported = client.fetch_totals()

        data = {
            'device_count': len(devices),
            'totals': totals.to_dict(),
            'rates': rates.to_dict(),
            'reported': reported.to_dict() if reported is not None else None,
        }
        output_result(data, ctx, format_stats_rich)

    except Exception as e:
        fail(e)

@cli.command('set-limit')
@click.argument('mac')
@click.option('--download', type=int, help='Download ceiling in kbps')
@click.option('--upload', type=int, help='Upload ceiling in kbps')
@click.option('--preset', type=click.Choice(list(LIMIT_PRESETS)), help='Use a preset instead of explicit ceilings')
@click.pass_context
def set_limit(ctx, mac, download, upload, preset):
    """Set a speed limit on one client.

    Ceilings are clamped to the router's accepted range and rounded to 100 kbps.
    Unset ceilings fall back to the configured defaults.
    """
    try:
        control = LimitControl(ctx.obj['client'])
        control.open(DeviceRecord(mac=mac))
        if preset:
            control.apply_preset(preset)
        if download is not None:
            control.set_download(download)
        if upload is not None:
            control.set_upload(upload)

        result = asyncio.run(control.apply())
        if not result.success:
            fail(result.error)

        data = {
            'success': True,
            'mac': result.mac,
            'limit': result.limit.to_dict(),
            'message': f"Limit set for {result.mac}: {result.limit.download_limit}/{result.limit.upload_limit} kbps",
        }
        output_result(data, ctx, format_write_result)

    except Exception as e:
        fail(e)

@cli.command('clear-limit')
@click.argument('mac')
@click.pass_context
def clear_limit(ctx, mac):
    """Remove the speed limit from one client."""
    try:
        control = LimitControl(ctx.obj['client'])
        result = asyncio.run(control.remove(DeviceRecord(mac=mac)))
        if not result.success:
            fail(result.error)

        output_result({'success': True, 'mac': mac, 'message': f"Limit removed for {mac}"},
                      ctx, format_write_result)

    except Exception as e:
        fail(e)

@cli.command('set-interface')
@click.argument('name', type=click.Choice(list(INTERFACES)))
@click.pass_context
def set_interface(ctx, name):
    """Select the interface bandixd monitors."""
    try:
        control = ServiceControl(ctx.obj['client'], settle_delay=0)
        result = asyncio.run(control.select_interface(name))
        if not result.success:
            fail(result.error)

        label = INTERFACES[name][0]
        output_result({'success': True, 'interface': name, 'message': f"Monitoring {name} ({label})"},
                      ctx, format_write_result)

    except Exception as e:
        fail(e)

@cli.command()
@click.argument('action', type=click.Choice(SERVICE_ACTIONS))
@click.pass_context
def service(ctx, action):
    """Start, stop or restart the bandixd service."""
    try:
        control = ServiceControl(ctx.obj['client'], settle_delay=0)
        result = asyncio.run(control.control(action))
        if not result.success:
            fail(result.error)

        output_result({'success': True, 'action': action, 'message': f"Service {action} requested"},
                      ctx, format_write_result)

    except Exception as e:
        fail(e)

async def collect_history(client, samples):
    """Poll ``samples`` cycles at the configured interval and return the store."""
    store = StateStore(
        capacity=settings.get('history.capacity', 60),
        history_source=settings.get('history.source', 'server'),
    )
    scheduler = PollScheduler(client, store)
    for sample in range(samples):
        if sample:
            await asyncio.sleep(scheduler.interval)
        await scheduler.trigger()
    return store

@cli.command()
@click.argument('path', type=click.Path(dir_okay=False, writable=True))
@click.option('--width', type=click.IntRange(min=2), default=800, help='Image width in pixels')
@click.option('--height', type=click.IntRange(min=2), default=240, help='Image height in pixels')
@click.option('--samples', type=click.IntRange(min=1), default=1, help='Poll cycles to run before rendering')
@click.pass_context
def snapshot(ctx, path, width, height, samples):
    """Render the bandwidth history chart to a PNG image."""
    try:
        store = asyncio.run(collect_history(ctx.obj['client'], samples))
        state = store.state

        surface = ImageSurface(width, height)
        if not render_chart(state.history, surface):
            fail("No bandwidth history to render")
        surface.save(path)

        data = {
            'success': True,
            'path': path,
            'points': len(state.history),
            'width': width,
            'height': height,
            'message': f"Chart with {len(state.history)} points written to {path}",
        }
        output_result(data, ctx, format_write_result)

    except Exception as e:
        fail(e)

if __name__ == '__main__':
    cli()
