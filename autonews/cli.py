"""
Command-line interface for autonews.
"""
import sys
import argparse
import logging
import asyncio
from functools import partial
from typing import Callable, List, Optional

from tqdm import tqdm

from autonews.app import NewsApp
from autonews.config import Config, config as default_config
from autonews.core.models import NewsItem
from autonews.views.binding import ImageSlot
from autonews.views.detail import DetailMode

logger = logging.getLogger(__name__)

HELP_TEXT = "n: next, <number>: open, t: toggle detail mode, r: reload, q: quit"


def parse_args(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="autonews - AutoDoc news feed reader")
    parser.add_argument("--config", help="Path to a YAML or JSON config file")
    parser.add_argument("--base-url", help="Override the news API base URL")
    parser.add_argument("--mode", choices=[m.value for m in DetailMode],
                        help="Open articles in the embedded reader or the browser")
    parser.add_argument("--dump", action="store_true",
                        help="Load every page, print the feed and exit")
    parser.add_argument("--no-images", action="store_true", help="Do not prefetch thumbnails")
    parser.add_argument("--write-config", metavar="PATH",
                        help="Write the effective configuration to a YAML or JSON file and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def setup_logging(config: Config, verbose: bool = False):
    """
    Configure logging to stderr, plus a log file when logging.file is set.
    """
    level = logging.DEBUG if verbose else getattr(
        logging, str(config.get('logging.level', 'INFO')).upper(), logging.INFO
    )
    handlers = [logging.StreamHandler()]
    log_file = config.get('logging.file')
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def format_item(index: int, item: NewsItem, slot: Optional[ImageSlot] = None) -> str:
    """
    Render one news item as terminal text.
    """
    if slot is not None and slot.image is not None:
        width, height = slot.image.size
        image = f"[image {width}x{height}]"
    else:
        image = "[no image]"
    return (
        f"{index + 1:>4}. {item.title}\n"
        f"      {item.category_type} | {item.display_date} {image}\n"
        f"      {item.display_description}"
    )


class TerminalRenderer:
    """
    Renderer that writes the feed to the terminal.
    """
    def __init__(self, output: Callable[[str], None] = print):
        self.output = output
        self.count = 0

    def render_list(self, count: int) -> None:
        if count != self.count:
            logger.debug(f"Feed list now holds {count} items")
        self.count = count

    def render_item(self, index: int, item: NewsItem, slot: ImageSlot) -> None:
        self.output(format_item(index, item, slot))


class TerminalReader:
    """
    Interactive terminal session over a NewsApp.
    """
    def __init__(self, app: NewsApp, screen_size: int = 5, output: Callable[[str], None] = print):
        self.app = app
        self.screen_size = screen_size
        self.output = output
        self.shown = 0
        self.slots = [
            ImageSlot(on_show=partial(self._image_arrived, offset)) for offset in range(screen_size)
        ]
        # Feed index currently printed from each slot, None until its row is printed
        self.rows: List[Optional[int]] = [None] * screen_size

    def _image_arrived(self, offset: int):
        index = self.rows[offset]
        if index is None or index >= len(self.app.store.items):
            return
        # Redraw the row now that its thumbnail is in
        self.output(format_item(index, self.app.store.items[index], self.slots[offset]))

    async def show_next(self) -> int:
        """
        Show the next screen of items, announcing each one as visible.

        When every loaded item is already on screen but the feed has more,
        the last item is announced again so a page that failed to load is
        requested once more.

        Returns:
            Number of items shown
        """
        store = self.app.store
        binding = self.app.binding
        if self.shown >= len(store.items) and store.has_more:
            if not store.is_loading:
                binding.on_item_visible(len(store.items) - 1)
            await binding.wait_for_page()
        end = min(self.shown + self.screen_size, len(store.items))
        self.rows = [None] * self.screen_size
        for offset, index in enumerate(range(self.shown, end)):
            # Cells are reused screen to screen
            binding.render_item(index, self.slots[offset])
            self.rows[offset] = index
            binding.on_item_visible(index)
        count = end - self.shown
        self.shown = end
        if count == 0:
            if not store.has_more:
                self.output("No more news.")
            elif store.is_loading:
                self.output("Loading...")
            else:
                self.output("Could not load more news, press n to retry.")
        return count

    async def reload(self):
        self.shown = 0
        self.rows = [None] * self.screen_size
        await self.app.store.load_initial()
        await self.show_next()

    async def handle(self, command: str) -> bool:
        """
        Run one command.

        Returns:
            False when the session should end
        """
        command = command.strip().lower()
        if command in ('q', 'quit', 'exit'):
            return False
        if command in ('', 'n', 'next'):
            await self.show_next()
        elif command in ('t', 'toggle'):
            mode = self.app.detail.toggle()
            self.output(f"Articles now open in {mode.value} mode")
        elif command in ('r', 'reload'):
            await self.reload()
        elif command.isdigit():
            index = int(command) - 1
            if 0 <= index < len(self.app.store.items):
                task = self.app.binding.on_item_selected(index)
                if task is not None:
                    await task
            else:
                self.output(f"No item {command}")
        else:
            self.output(HELP_TEXT)
        return True

    async def run(self):
        loop = asyncio.get_running_loop()
        self.output(HELP_TEXT)
        await self.reload()
        while True:
            command = await loop.run_in_executor(None, input, "> ")
            if not await self.handle(command):
                break


async def dump_feed(app: NewsApp, output: Callable[[str], None] = print) -> int:
    """
    Load every page of the feed and print it.

    Returns:
        Number of items printed
    """
    store = app.store
    await store.load_initial()
    page_size = app.client.page_size
    total_pages = max(1, -(-store.state.total_count // page_size))
    with tqdm(total=total_pages, initial=1 if store.items else 0, desc="Loading pages") as pbar:
        while store.has_more:
            before = len(store.items)
            await store.load_more_if_needed(before - 1)
            if len(store.items) == before:
                logger.warning(f"Stopped after {before} of {store.state.total_count} items")
                break
            pbar.update(1)
    for index, item in enumerate(store.items):
        output(format_item(index, item, None))
    return len(store.items)


async def async_main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the application.
    """
    args = parse_args(argv)
    config = Config(args.config) if args.config else default_config
    if args.base_url:
        config.config['api']['base_url'] = args.base_url
    if args.mode:
        config.config['detail']['mode'] = args.mode
    setup_logging(config, args.verbose)

    if args.write_config:
        if not config.save(args.write_config):
            return 1
        logger.info(f"Configuration written to {args.write_config}")
        return 0

    renderer = TerminalRenderer()
    app = NewsApp(config, renderer, prefetch_images=False if (args.no_images or args.dump) else None)
    try:
        if args.dump:
            count = await dump_feed(app)
            logger.info(f"Printed {count} news items")
        else:
            reader = TerminalReader(app, screen_size=config.get('display.screen_size', 5))
            await reader.run()
    finally:
        await app.close()
    return 0


def main():
    """
    Entry point for the command-line script.
    """
    try:
        return asyncio.run(async_main())
    except (KeyboardInterrupt, EOFError):
        logger.info("Interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"An error occurred: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
