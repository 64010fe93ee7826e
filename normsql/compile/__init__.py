"""normsql compilation layer: fragments → parameterized SQL."""
from normsql.compile.base import CompiledStatement, PlaceholderCompiler, RenderedSQL
from normsql.compile.builder import Builder
from normsql.compile.conjunctions import Conjunction, and_, nand, nor, or_, xor
from normsql.compile.mysql import MySQLCompiler
from normsql.compile.postgres import PostgresCompiler

__all__ = [
    "CompiledStatement",
    "PlaceholderCompiler",
    "RenderedSQL",
    "Builder",
    "Conjunction",
    "and_",
    "nand",
    "nor",
    "or_",
    "xor",
    "MySQLCompiler",
    "PostgresCompiler",
]
