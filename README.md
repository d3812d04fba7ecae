# legoland

Turn a 3D triangle mesh into a buildable LEGO model.

`legoland` works in these steps:

1. Read an ASCII PLY file.
2. Scale the mesh so that its height equals the height you ask for.
3. Split triangles until every edge is shorter than one brick unit.
4. Voxelize the points on a grid of 8 x 8 x 9.6 units, where one cell is one stud square, one brick high.
5. Thicken thin walls toward the inside of the model so that it can stand.
6. Cover each layer with standard bricks. Bricks run along x on even layers and along y on odd layers, so the layers interlock.
7. Write the result as an LDraw `.DAT` file.

## Input

The reader takes the vertex and face counts from the PLY header. It reads the
first three numbers of each vertex as x, z, y, so the file's second axis
becomes the height. Each face is a count followed by three vertex indices.

If the word `red` appears in the header, the model is treated as coloured. Each
vertex then carries four more integers: red, green, blue and alpha. Each voxel
gets the palette colour that most of its points map to.

The reader raises `legoland.model.PlyFormatError` when the file:

- does not start with `ply`,
- ends early,
- holds a token that is not a number where a number is expected, or
- has a face that refers to a missing vertex.

## Bricks and colours

Eleven brick types are used, largest first:

| Size | Part     |
|------|----------|
| 2x8  | 3007.DAT |
| 2x6  | 2456.DAT |
| 2x4  | 3001.DAT |
| 2x3  | 3002.DAT |
| 2x2  | 3003.DAT |
| 1x8  | 3008.DAT |
| 1x6  | 3009.DAT |
| 1x4  | 3010.DAT |
| 1x3  | 3622.DAT |
| 1x2  | 3004.DAT |
| 1x1  | 3005.DAT |

The palette has sixteen colours. The colour number written to the output file
is the index into `legoland.palette.AVAILABLE_COLORS`.

## Installation

```
pip install .
```

## Command line

```
legoland <source_model.ply> <destination_model.dat> [model height] [model thickness] [bricks per step]
```

- **model height**: the height the model is scaled to. The default is 500.
- **model thickness**: wall thickness in voxels.
  - `0` (the default) picks a thickness from the size of the model.
  - `1` leaves the shell as it is.
- **bricks per step**: how many bricks go into one build step.
  - `0` (the default) starts a new step on every layer.

Progress messages are logged to standard error. The command prints the
processor time it took and exits with status 0. It exits with status 1, after
printing an error, in these cases:

- the source file is missing or is not a valid PLY file,
- the model has no height,
- the thickness or the bricks per step is negative.

Example:

```
legoland bunny.ply bunny.dat 400 2 20
```

## Library use

```python
from legoland.model import read_ply
from legoland.brick import brickify_voxel_image, export_brick_model

model = read_ply("bunny.ply", 500)
model.supersample()
model.normalize()
image = model.voxelize()
image.thicken(0)

bricks = brickify_voxel_image(image)
export_brick_model(bricks, "bunny.dat", 0)
```

Other entry points:

- `legoland.brick.write_brick_model(bricks, stream, filename, bricks_per_step)` writes to any open text stream instead of a file.
- `legoland.brick.sort_bricks` orders bricks by layer, then row, then column.
- `legoland.brick.brickify_plane(image, z)` converts a single layer.
- `legoland.palette.quantize_color` maps a `Color` to the index of the nearest palette colour. It returns `None` for the "don't care" colour.
- `legoland.voxel_image.VoxelImage` stores the voxels and offers these methods:
  - `add_voxel`
  - `remove_voxel`
  - `find_voxel`
  - `has_voxel`
  - `voxels`
  - `get_slice`
  - `thicken`
  - `update_voxel_colors`

## What it does not do

`legoland` does not display the voxel or brick model. To see the result, open
the `.DAT` file it writes in an LDraw viewer such as MLCad. It reads only
ASCII PLY files and writes only the LDraw format.