"""Monte-Carlo light-transport renderer.

This package estimates the radiance reaching each pixel of an image by
tracing light paths from a camera through a scene of shapes with
surface-scattering models. It supports:
- Whitted, path tracing and importance-sampling integrators
- Lambertian, perfect specular and Fresnel dielectric BSDFs
- Sphere and plane shapes placed by translate/rotate/scale transform chains
- Pseudorandom, stratified and best-candidate samplers
- Parallel rendering on a thread pool with cancellation

Subpackages:
    core: Vector algebra, transforms, rays, spectra, configuration, render entry point
    geometry: Bounding boxes, shapes and surface interactions
    materials: Textures, BSDFs and Fresnel equations
    scene: Primitives, lights and the World container
    sampling: Samplers, samples and random streams
    integrators: Light-transport algorithms and the render loop
    camera: Camera models with ray generation
    film: Radiance accumulation and image export
"""

__version__ = "0.1.0"
