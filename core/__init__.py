"""
Core modules for Map Subsetter.

This package contains the workflow modules that apply the geometry_clip
core to whole vector layers.

Modules:
    input_reader: Read vector files and map files into GeoDataFrames
    feature_clipping: Clip GeoDataFrame features to a clip window
    layer_processor: Clip multiple layers in batch
    output_generator: Save clipped layers and metadata
"""

__version__ = '1.0.0'
