"""
gapdata_pipeline.pipelines — End-to-end pipeline orchestrators.

Each pipeline module exports a run() function that reads its defaults
from settings, accepts explicit overrides, and returns a PipelineResult.

    from gapdata_pipeline.pipelines import clean_dataset

    result = clean_dataset.run(dry_run=True)
"""
