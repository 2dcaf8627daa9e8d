"""Audio output building blocks: conversion, dithering, normalisation, limiting and stream views."""

__version__ = "0.5.0"