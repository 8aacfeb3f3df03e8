from __future__ import annotations
import argparse
import logging
import os
from rich.console import Console
from rich.table import Table

from libobj import ObjError, diff_scenes, load_scene, load_textures, save_scene
from libobj.logging_config import setup_logging
from libobj.summary import summarize_scene

console = Console()

def cmd_summary(args: argparse.Namespace) -> int:
    s = summarize_scene(args.file, triangulate=args.triangulate, extensions=not args.no_ext)
    console.print(f"[bold]File:[/bold] {s.path}")
    console.print(f"[bold]Size:[/bold] {s.file_size} bytes")
    console.print(f"[bold]Vertices:[/bold] {s.total_vertices}   [bold]Elements:[/bold] {s.total_elements}")

    st = Table(title="Shapes")
    st.add_column("Name", overflow="fold")
    st.add_column("Group", overflow="fold")
    st.add_column("Material", overflow="fold")
    st.add_column("Type", justify="center")
    st.add_column("Elements", justify="right")
    st.add_column("Vertices", justify="right")
    st.add_column("Attributes")
    st.add_column("Xf", justify="center")

    if s.shapes:
        for sh in s.shapes:
            mat = sh.matname if sh.matid >= 0 or not sh.matname else f"{sh.matname} [red](missing)[/red]"
            st.add_row(sh.name, sh.groupname, mat, sh.etype, str(sh.nelems), str(sh.nverts),
                       sh.attributes, "x" if sh.xformed else "")
    else:
        st.add_row("(none found)", "-", "-", "-", "-", "-", "-", "-")
    console.print(st)

    t = Table(title="Materials / Textures")
    t.add_column("Materials", overflow="fold")
    t.add_column("Textures", overflow="fold")
    rows = max(len(s.material_names), len(s.texture_paths))
    if rows:
        for i in range(rows):
            m = s.material_names[i] if i < len(s.material_names) else ""
            tx = s.texture_paths[i] if i < len(s.texture_paths) else ""
            t.add_row(m, tx)
    else:
        t.add_row("(none found)", "-")
    console.print(t)

    if s.camera_names or s.environment_names:
        console.print(f"[bold]Cameras:[/bold] {', '.join(s.camera_names) or '-'}")
        console.print(f"[bold]Environments:[/bold] {', '.join(s.environment_names) or '-'}")
    return 0

def cmd_convert(args: argparse.Namespace) -> int:
    ext = not args.no_ext
    scene = load_scene(args.src, triangulate=args.triangulate, extensions=ext)
    out_dir = os.path.dirname(os.path.abspath(args.dst))
    os.makedirs(out_dir, exist_ok=True)
    save_scene(args.dst, scene, extensions=ext)
    console.print(f"[green]Done.[/green] {args.src} -> {args.dst} ({len(scene.shapes)} shapes)")
    return 0

def cmd_verify_roundtrip(args: argparse.Namespace) -> int:
    ext = not args.no_ext
    src = os.path.abspath(args.file)
    base, suffix = os.path.splitext(src)
    outp = base + ".roundtrip" + suffix

    first = load_scene(src, triangulate=args.triangulate, extensions=ext)
    save_scene(outp, first, extensions=ext)
    second = load_scene(outp, extensions=ext)

    diffs = diff_scenes(first, second, tol=args.tol)
    console.print(f"[bold]IN :[/bold] {src}")
    console.print(f"[bold]OUT:[/bold] {outp}")
    if not diffs:
        console.print("[green]IDENTICAL[/green]")
        return 0
    for d in diffs[: args.max_diffs]:
        console.print(f"  {d}")
    if len(diffs) > args.max_diffs:
        console.print(f"  ... {len(diffs) - args.max_diffs} more")
    console.print("[red]DIFF[/red]")
    return 1

def cmd_textures(args: argparse.Namespace) -> int:
    scene = load_scene(args.file, extensions=not args.no_ext)
    loaded = load_textures(scene, args.file, req_comp=args.req_comp, workers=args.workers, strict=args.strict)

    t = Table(title=f"Textures ({loaded}/{len(scene.textures)} loaded)")
    t.add_column("Path", overflow="fold")
    t.add_column("Size", justify="right")
    t.add_column("Comp", justify="right")
    if scene.textures:
        for tex in scene.textures:
            if tex.loaded:
                t.add_row(tex.path, f"{tex.width}x{tex.height}", str(tex.ncomp))
            else:
                t.add_row(tex.path, "[red]not loaded[/red]", "-")
    else:
        t.add_row("(none found)", "-", "-")
    console.print(t)
    return 0 if loaded == len(scene.textures) else 1

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="objcli")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    p.add_argument("--log-file", default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    def scene_flags(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--triangulate", action="store_true", help="Fan-triangulate faces and split polylines")
        sp.add_argument("--no-ext", action="store_true", help="Ignore vc/vr/xf/c/e extension records")

    s = sub.add_parser("summary", help="Print info about an OBJ or objbin file")
    s.add_argument("file")
    scene_flags(s)
    s.set_defaults(fn=cmd_summary)

    c = sub.add_parser("convert", help="Convert between .obj and .objbin (by suffix)")
    c.add_argument("src")
    c.add_argument("dst")
    scene_flags(c)
    c.set_defaults(fn=cmd_convert)

    r = sub.add_parser("verify-roundtrip", help="Load -> save -> load and compare scenes")
    r.add_argument("file")
    r.add_argument("--tol", type=float, default=1e-5)
    r.add_argument("--max-diffs", type=int, default=20)
    scene_flags(r)
    r.set_defaults(fn=cmd_verify_roundtrip)

    t = sub.add_parser("textures", help="Load the textures referenced by a scene")
    t.add_argument("file")
    t.add_argument("--req-comp", type=int, default=0, choices=(0, 1, 2, 3, 4))
    t.add_argument("--workers", type=int, default=1)
    t.add_argument("--strict", action="store_true", help="Fail on the first texture that does not decode")
    t.add_argument("--no-ext", action="store_true")
    t.set_defaults(fn=cmd_textures)

    return p

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose or args.log_file:
        level = logging.DEBUG if args.verbose > 1 else logging.INFO
        setup_logging(level, log_file=args.log_file)
    try:
        return int(args.fn(args))
    except ObjError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 2

if __name__ == "__main__":
    raise SystemExit(main())
