import os
import sys
import logging
import argparse

from ..error import (
    ProgressErrorArchiveLoad,
    ProgressErrorEntryNotFound,
    ProgressErrorExtract,
    ProgressErrorVideoDecode,
)
from ..progress import Progress
from ..utils import write_ppm, write_wav
from ...errors import PodException, NotFoundException
from ...pod import PodArchive
from ...tvi import WIDTH, HEIGHT


def load_archive(archive_path: str) -> PodArchive:
    try:
        return PodArchive.load(archive_path)
    except PodException as exc:
        ProgressErrorArchiveLoad.print(detail=str(exc))
        sys.exit(1)


def cmd_info(args):
    archive = load_archive(args.archive)

    print()
    print(f"  Description: {archive.description}")
    print(f"  Entries:     {archive.file_count}")
    print()

    for name in archive.list_names():
        print(f"  {name}")

    print()


def cmd_list(args):
    archive = load_archive(args.archive)

    for entry in archive.entries:
        extra = f"  [{entry.extra}]" if entry.extra else ""
        print(f"{entry.path:32s} {entry.size:10d}  0x{entry.offset:08X}{extra}")


def cmd_extract(args):
    if os.path.exists(args.out):
        print()
        print("  Output file already exists. This program will not overwrite any")
        print("  existing file. You should specify a new path for the output.")
        print()
        sys.exit(1)

    archive = load_archive(args.archive)

    try:
        archive.dump_raw_file(args.out, args.directory, args.name)
    except NotFoundException as exc:
        ProgressErrorEntryNotFound.print(detail=str(exc))
        sys.exit(1)
    except (PodException, OSError) as exc:
        ProgressErrorExtract.print(detail=str(exc))
        sys.exit(1)


def cmd_video(args):
    archive = load_archive(args.archive)

    if archive.find_entry(args.directory, args.name) is None:
        ProgressErrorEntryNotFound.print(detail=f"{args.directory}\\{args.name}")
        sys.exit(1)

    os.makedirs(args.out_dir, exist_ok=True)

    with Progress("Decoding frames", ProgressErrorVideoDecode) as pbar:
        palette = archive.get_palette(args.palette_directory, args.palette_name)
        reader = archive.open_video(args.directory, args.name)

        pbar(len(reader))

        audio = bytearray()

        for video_frame, audio_frame in reader:
            out_path = os.path.join(args.out_dir, f"frame{video_frame.frame_number:04d}.ppm")
            write_ppm(out_path, WIDTH, HEIGHT, video_frame.get_rgb_bytes(palette))

            if audio_frame is not None:
                audio += audio_frame.pcm

            pbar()

    if audio:
        write_wav(os.path.join(args.out_dir, "audio.wav"), bytes(audio))


def cmd_endscreen(args):
    archive = load_archive(args.archive)

    try:
        end_screen = archive.get_end_screen(args.name)
    except PodException as exc:
        ProgressErrorExtract.print(detail=str(exc))
        sys.exit(1)

    if end_screen is None:
        ProgressErrorEntryNotFound.print(detail=f"STARTUP\\{args.name}")
        sys.exit(1)

    end_screen.print_screen()


def make_parser():
    parser = argparse.ArgumentParser(description="POD Archive Explorer")
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="print debug log messages")

    subparsers = parser.add_subparsers(dest="command", required=True)

    info_parser = subparsers.add_parser("info", help="show the archive description and the sorted file names")
    info_parser.add_argument("archive", type=str, help="path to the POD archive")
    info_parser.set_defaults(func=cmd_info)

    list_parser = subparsers.add_parser("list", help="list all entries in archive order")
    list_parser.add_argument("archive", type=str, help="path to the POD archive")
    list_parser.set_defaults(func=cmd_list)

    extract_parser = subparsers.add_parser("extract", help="extract the raw bytes of one entry")
    extract_parser.add_argument("archive", type=str, help="path to the POD archive")
    extract_parser.add_argument("directory", type=str, help="entry directory (e.g. ART), empty string for none")
    extract_parser.add_argument("name", type=str, help="entry name (e.g. TITLE.RAW)")
    extract_parser.add_argument("out", type=str, help="output path (file MUST NOT exist)")
    extract_parser.set_defaults(func=cmd_extract)

    video_parser = subparsers.add_parser("video", help="decode a TVI entry to PPM frames and a WAV file")
    video_parser.add_argument("archive", type=str, help="path to the POD archive")
    video_parser.add_argument("directory", type=str, help="directory of the TVI entry")
    video_parser.add_argument("name", type=str, help="name of the TVI entry")
    video_parser.add_argument("palette_directory", type=str, help="directory of the ACT palette entry")
    video_parser.add_argument("palette_name", type=str, help="name of the ACT palette entry")
    video_parser.add_argument("out_dir", type=str, help="output folder for frames and audio")
    video_parser.set_defaults(func=cmd_video)

    endscreen_parser = subparsers.add_parser("endscreen", help="render a STARTUP end screen in the terminal")
    endscreen_parser.add_argument("archive", type=str, help="path to the POD archive")
    endscreen_parser.add_argument("name", type=str, help="name of the end screen entry (e.g. END.BIN)")
    endscreen_parser.set_defaults(func=cmd_endscreen)

    return parser


def main(argv=None):
    args = make_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    args.func(args)


if __name__ == "__main__":
    main()
