"""templatejs compiler: lowers parsed template trees to JavaScript source."""

from templatejs.compiler.accumulator import AccumulatorFrame, OutputAccumulator
from templatejs.compiler.core import JSCompiler
from templatejs.compiler.emitter import Emitter

__all__ = ["AccumulatorFrame", "Emitter", "JSCompiler", "OutputAccumulator"]
