from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from src.application.dtos.responsive_dto import BreakpointData, SourceData
from src.domain.interfaces import AssetSource
from src.domain.services.context import ResponsiveContext
from src.domain.services.dimension_calculator import ResponsiveDimensionCalculator
from src.domain.services.responsive import Responsive


def translate_query_args(args: Mapping[str, Any]) -> dict[str, Any]:
    """Turn flat query arguments into responsive parameters.

    ``lg_ratio`` becomes ``lg:ratio`` and ``width`` becomes ``glide:width``.
    Arguments that were not supplied (``None``) are dropped so they never
    shadow inherited values.
    """
    params: dict[str, Any] = {}
    for key, value in args.items():
        if value is None:
            continue
        key = key.replace("_", ":")
        if key == "width":
            key = "glide:width"
        params[key] = value
    return params


@dataclass
class QueryResponsiveImageUseCase:
    """
    Resolve all breakpoints of an asset for a query-style caller.

    Accepted arguments: ``ratio``, ``width``, ``webp``, ``avif``,
    ``placeholder`` and ``<label>_ratio`` for every configured breakpoint.
    Toggles that are not supplied fall back to configuration.
    """

    assets: AssetSource
    context: ResponsiveContext

    def execute(self, reference: Any, args: Mapping[str, Any]) -> list[BreakpointData]:
        config = self.context.config
        args = {
            "webp": config.webp,
            "avif": config.avif,
            "placeholder": config.placeholder,
            **{k: v for k, v in args.items() if v is not None},
        }

        responsive = Responsive(reference, translate_query_args(args), self.context, self.assets)

        # Ratio only means something for the built-in calculator
        report_ratio = isinstance(self.context.calculator, ResponsiveDimensionCalculator)

        results: list[BreakpointData] = []
        for breakpoint in responsive.breakpoints():
            results.append(
                BreakpointData(
                    asset_id=responsive.asset.id,
                    label=breakpoint.label,
                    min_width=breakpoint.min_width,
                    width_unit=breakpoint.width_unit,
                    sources=[
                        SourceData(**source.to_dict())
                        for source in breakpoint.get_sources()
                    ],
                    placeholder=breakpoint.placeholder() if breakpoint.placeholder_enabled() else None,
                    ratio=breakpoint.ratio if report_ratio else None,
                )
            )
        return results
