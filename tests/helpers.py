from gottago.models import Bathroom


def make_bathroom(id, latitude=40.0, longitude=-74.0, **ratings):
    return Bathroom(id=id, name=f"Bathroom {id}", latitude=latitude, longitude=longitude, **ratings)
